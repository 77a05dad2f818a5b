"""Colour theme for the treesift CLI.

Colours come from the bundled ``data/theme.toml`` and are overlaid key by
key with ``~/.config/treesift/theme.toml`` when that file exists. An
override that fails validation drops back to the bundled colours.
"""

import logging
import re
import tomllib
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from treesift.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_DIGITS = re.compile(r"#[0-9a-fA-F]+")

# Styles rendered bold on top of their colour.
_BOLD_STYLES = frozenset({"error", "directory", "volume", "match"})


def _check_hex(value: str) -> str:
    color = value.strip()
    if not color.startswith("#"):
        msg = "color must start with '#'"
        raise ValueError(msg)
    if len(color) not in (4, 7):
        msg = "color must be #RGB or #RRGGBB format"
        raise ValueError(msg)
    if not _HEX_DIGITS.fullmatch(color):
        msg = f"invalid hex color '{color}'"
        raise ValueError(msg)
    return color


HexColor = Annotated[str, AfterValidator(_check_hex)]


class ThemeColors(BaseModel):
    """Colours of the treesift CLI, one per style name."""

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    directory: HexColor = "#0e8ac8"
    file: HexColor = "#ffffff"
    volume: HexColor = "#c1ff62"
    match: HexColor = "#faf870"


def bundled_theme_file() -> Traversable:
    """The default theme shipped inside the package."""
    return resources.files("treesift.data").joinpath("theme.toml")


def read_theme_file(path: Path | Traversable) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Args:
        path: Theme file to read.

    Returns:
        String-valued colour entries, or None if the file is missing or
        unusable. Unusable files are logged.
    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return None
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_theme_colors(user_path: Path | None = None) -> ThemeColors:
    """Merge the bundled colours with the user's overrides.

    Args:
        user_path: Override file. Defaults to the XDG theme path.

    Returns:
        Validated colours; the built-in defaults if the merge is invalid.
    """
    bundled = read_theme_file(bundled_theme_file())
    if bundled is None:
        logger.error("Bundled theme is missing; installation may be corrupted")
        bundled = {}

    path = user_path if user_path is not None else get_user_theme_path()
    overrides = read_theme_file(path) or {}
    if overrides:
        logger.debug("Loaded %d theme overrides from %s", len(overrides), path)

    try:
        return ThemeColors(**{**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Invalid theme in %s, using defaults: %s", path, e)
        return ThemeColors()


def build_rich_theme(colors: ThemeColors) -> Theme:
    """Turn theme colours into Rich styles, plus the ``bold_header`` and ``dim`` aliases."""
    styles = {
        name: f"bold {color}" if name in _BOLD_STYLES else color
        for name, color in colors.model_dump().items()
    }
    styles["bold_header"] = f"bold {colors.header}"
    styles["dim"] = colors.muted
    return Theme(styles)


@lru_cache(maxsize=1)
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once per process."""
    return build_rich_theme(load_theme_colors())
