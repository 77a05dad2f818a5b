"""Where treesift keeps its files.

Only configuration is persisted: search settings and an optional colour
theme, both under the XDG config home (``~/.config/treesift/`` unless
``XDG_CONFIG_HOME`` says otherwise).
"""

import os
from pathlib import Path

APP_NAME = "treesift"

SETTINGS_FILENAME = "settings.toml"
THEME_FILENAME = "theme.toml"


def get_config_dir() -> Path:
    """Get the configuration directory.

    ``XDG_CONFIG_HOME`` is honoured only when it holds an absolute path;
    empty or relative values fall back to ``~/.config``.

    Returns:
        Path to the treesift configuration directory.
    """
    base = os.environ.get("XDG_CONFIG_HOME", "")
    if base and os.path.isabs(base):
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_settings_path() -> Path:
    """Get the search settings file path."""
    return get_config_dir() / SETTINGS_FILENAME


def get_user_theme_path() -> Path:
    """Get the user colour theme path."""
    return get_config_dir() / THEME_FILENAME


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    path = get_config_dir()
    try:
        path.mkdir(mode=0o700, parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create config directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create config directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
