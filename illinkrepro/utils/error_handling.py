"""
Standardized error handling for repro creation.

The exception classes here form the error taxonomy of the tool: usage mistakes,
missing linker invocations, malformed command lines and filesystem failures.
"""

import contextlib
from collections.abc import Generator
from pathlib import Path

from .logging import get_logger


class IllinkReproError(Exception):
    """Base exception class for illinkrepro operations."""

    def __init__(self, message: str, operation: str | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.cause = cause


class UsageError(IllinkReproError):
    """Invalid input from the user: missing log, output collision, unreadable log."""


class NotFoundError(IllinkReproError):
    """No linker invocation matches the log and the requested filters."""


class MalformedInvocationError(IllinkReproError):
    """The recorded command line does not have the expected launcher/tool shape."""


class FileOperationError(IllinkReproError):
    """Standardized exception for file operation errors."""

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        operation: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, operation, cause)
        self.path = Path(path) if path else None


@contextlib.contextmanager
def safe_file_operation(
    operation: str, path: Path | str | None = None, log_operations: bool = False
) -> Generator[None, None, None]:
    """Context manager for safe file operations with consistent error handling.

    Args:
        operation: Name of the file operation for logging and error messages
        path: File/directory path involved in the operation
        log_operations: Whether to log the start/completion of operations

    Yields:
        None

    Raises:
        FileOperationError: If any file operation error occurs within the context
    """
    logger = get_logger(__name__)
    path_str = str(path) if path else "unknown"

    if log_operations:
        logger.debug(f"Starting {operation}: {path_str}")

    try:
        yield
        if log_operations:
            logger.debug(f"Completed {operation}: {path_str}")
    except FileOperationError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        error_msg = f"{operation} failed for {path_str}: {e}"
        logger.error(error_msg)
        raise FileOperationError(message=error_msg, path=path, operation=operation, cause=e) from e
