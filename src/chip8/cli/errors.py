"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes across all CLI tools.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    EMULATION_ERROR = 1  # The interpreter rejected the program
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Unified exception handler for all CLI tools.

    Formats the error message appropriately, optionally prints traceback
    in verbose mode, and exits with the correct exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Emulation")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from chip8.errors import Chip8Error

    if isinstance(error, Chip8Error):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.EMULATION_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)


def parse_address(value: str) -> int:
    """
    Parse an address given as 0x-prefixed hex, $-prefixed hex or decimal.

    Raises:
        click.BadParameter: If the value is not a number in 0-0xFFFF
    """
    try:
        if value.lower().startswith("0x"):
            address = int(value, 16)
        elif value.startswith("$"):
            address = int(value[1:], 16)
        else:
            address = int(value)
    except ValueError:
        raise click.BadParameter(f"Invalid address '{value}'") from None

    if not 0 <= address <= 0xFFFF:
        raise click.BadParameter(f"Address must be 0-65535 (0x0000-0xFFFF), got {value}")
    return address
