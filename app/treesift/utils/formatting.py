"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys
from datetime import datetime

from rich.console import Console

from treesift.core.theme import get_theme

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int) -> str:
    """Format a byte count for the size column.

    Uses 1024-based units with at most two decimals. Zero renders as an
    empty string, so directories show no size.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Human-readable size, e.g. "1.5 KB".
    """
    if size_bytes <= 0:
        return ""
    size = float(size_bytes)
    for unit in _SIZE_UNITS[:-1]:
        if size < 1024:
            return f"{size:.2f}".rstrip("0").rstrip(".") + f" {unit}"
        size /= 1024
    return f"{size:.2f}".rstrip("0").rstrip(".") + f" {_SIZE_UNITS[-1]}"


def format_timestamp(value: datetime) -> str:
    """Format a modification time for display."""
    return value.strftime("%Y-%m-%d %H:%M")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
