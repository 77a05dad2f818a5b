"""Search settings.

This module provides the configuration model and I/O functions for the
search engine: the result cap at which a session pauses, the debounce
delay applied to query edits, and the directories that are never
descended during a deep search.

Settings are stored in ~/.config/treesift/settings.toml. A missing file
is not an error; defaults apply.
"""

import logging
import os
import sys
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from treesift.core.paths import get_settings_path

logger = logging.getLogger(__name__)

DEFAULT_RESULT_CAP = 20
DEFAULT_DEBOUNCE_MS = 300


def default_skip_dir_names() -> list[str]:
    """Return the platform default list of system directory names.

    Only Windows has a system tree large and uninteresting enough to be
    excluded by default.
    """
    if sys.platform == "win32":
        return ["Windows"]
    return []


class SearchSettings(BaseModel):
    """Configuration for deep searches.

    Attributes:
        result_cap: Matches emitted per run before a session pauses.
        debounce_ms: Quiet period after the last query edit before searching.
        skip_dir_names: Directory names (last path segment, case-insensitive)
            that are never enumerated.
        skip_patterns: Glob patterns matched against full directory paths;
            a leading ``~`` expands to the home directory.
        progress_every_folders: Report progress at least this often, in
            expanded directories.
        progress_every_files: Report progress at least this often, in
            checked files.
    """

    model_config = ConfigDict(extra="forbid")

    result_cap: Annotated[
        int,
        Field(ge=1, le=10_000, description="Matches per run before pausing (1-10000)"),
    ] = DEFAULT_RESULT_CAP
    debounce_ms: Annotated[
        int,
        Field(ge=0, le=5_000, description="Debounce delay in milliseconds (0-5000)"),
    ] = DEFAULT_DEBOUNCE_MS
    skip_dir_names: Annotated[
        list[str],
        Field(
            default_factory=default_skip_dir_names,
            description="Directory names never descended",
        ),
    ]
    skip_patterns: Annotated[
        list[str],
        Field(
            default_factory=list,
            description="Glob patterns of directory paths never descended",
        ),
    ]
    progress_every_folders: Annotated[
        int,
        Field(ge=1, description="Report progress after this many folders"),
    ] = 10
    progress_every_files: Annotated[
        int,
        Field(ge=1, description="Report progress after this many files"),
    ] = 100

    @property
    def debounce_seconds(self) -> float:
        """Debounce delay as seconds, for timer APIs."""
        return self.debounce_ms / 1000.0


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> SearchSettings:
    """Load search settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated SearchSettings. Defaults when the file does not exist.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the file cannot be read or its content doesn't
            match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        logger.debug("No settings file at %s, using defaults", settings_path)
        return SearchSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return SearchSettings.model_validate(data.get("search", {}))
    except (ValueError, ValidationError) as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def save_settings(settings: SearchSettings, path: Path | None = None) -> Path:
    """Save search settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The settings to save.
        path: Destination path. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    data = {"search": settings.model_dump()}

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path
