"""CLI error handling for shopgen.

This module wraps shopgen exceptions into user-facing messages with
appropriate exit codes.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import click
from pydantic import ValidationError as PydanticValidationError

from shopgen.errors import LoadError, ShopgenError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


# Exit codes following sysexits.h convention
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # User error (missing file, malformed input)
EXIT_SYSTEM_ERROR = 2  # System error (database failure)


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        """Initialize CLIError.

        Args:
            message: User-facing error message.
            exit_code: Exit code for the CLI.
        """
        super().__init__(message)
        self.exit_code = exit_code


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format Pydantic validation error into user-friendly message.

    Args:
        err: Pydantic ValidationError instance.

    Returns:
        Formatted error message with field paths and issues.
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]

    for e in errors:
        loc = ".".join(str(x) for x in e["loc"])
        msg = e["msg"]
        lines.append(f"  - {loc}: {msg}")

    return "\n".join(lines)


def exit_code_for(err: ShopgenError) -> int:
    """Store failures are system errors; everything else is the user's to fix."""
    return EXIT_SYSTEM_ERROR if isinstance(err, LoadError) else EXIT_USER_ERROR


@contextmanager
def handle_errors(step: str) -> Iterator[None]:
    """Translate shopgen, settings and file system errors into CLIError.

    Args:
        step: Step name used as the message prefix.

    Raises:
        CLIError: For any ShopgenError, settings validation error or OSError.
    """
    try:
        yield
    except ShopgenError as e:
        raise CLIError(f"{step.capitalize()} failed: {e}", exit_code=exit_code_for(e)) from e
    except PydanticValidationError as e:
        raise CLIError(f"Invalid configuration:\n{format_pydantic_error(e)}") from e
    except OSError as e:
        raise CLIError(f"{step.capitalize()} failed: {e}", exit_code=EXIT_SYSTEM_ERROR) from e
