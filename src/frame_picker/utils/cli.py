"""Shared CLI error handling."""

import functools
import logging
from collections.abc import Callable

import typer
from rich.console import Console
from rich.logging import RichHandler

from frame_picker.errors import (
    ContextAllocationFailed,
    ConverterUnavailable,
    FramePickerError,
    InputNotFound,
    InvalidFilenamePattern,
    InvalidRange,
    LibraryError,
    NoSuitableStream,
    UnsupportedCodec,
)

EXIT_USER_ERROR = 50
EXIT_INTERRUPT = 130

# Checked in order, so subclasses must come before their bases
EXIT_CODES: list[tuple[type[FramePickerError], int]] = [
    (InputNotFound, 10),
    (InvalidRange, 11),
    (InvalidFilenamePattern, 12),
    (NoSuitableStream, 20),
    (UnsupportedCodec, 21),
    (ContextAllocationFailed, 22),
    (ConverterUnavailable, 23),
    (LibraryError, 30),
]

stderr_console = Console(stderr=True)


def exit_code_for(error: FramePickerError) -> int:
    for kind, code in EXIT_CODES:
        if isinstance(error, kind):
            return code
    return EXIT_USER_ERROR


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=stderr_console, rich_tracebacks=True, show_time=True)],
        force=True,
    )


def cli_error_handler(func: Callable) -> Callable:
    """Wrap a CLI command to catch common exceptions with consistent exit codes.

    Module-specific exceptions should be caught inside the wrapped function
    before they bubble up to this handler.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (typer.Exit, SystemExit):
            raise
        except KeyboardInterrupt:
            stderr_console.print("\n[bold yellow]Interrupted by user[/bold yellow]")
            raise typer.Exit(code=EXIT_INTERRUPT)
        except FramePickerError as e:
            stderr_console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=exit_code_for(e))
        except (FileNotFoundError, FileExistsError, ValueError, RuntimeError) as e:
            stderr_console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=EXIT_USER_ERROR)
        except Exception as e:
            stderr_console.print(f"[bold red]Unexpected error:[/bold red] {e}")
            raise typer.Exit(code=EXIT_USER_ERROR)

    return wrapper
