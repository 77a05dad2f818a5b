"""Utility modules for treesift.

This module exports commonly used utility functions.
"""

from treesift.utils.formatting import (
    console,
    err_console,
    format_size,
    format_timestamp,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "format_size",
    "format_timestamp",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
