"""
Decorators for cross-cutting concerns of the CLI commands.

- Operation logging (start, completion, failure)
- Execution timing
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable

from .logging import get_logger

__all__ = [
    "log_operation",
    "time_execution",
]


def log_operation(
    operation_name: str,
    log_level: str = "INFO",
) -> Callable:
    """
    Log operation start, completion and failure.

    Args:
        operation_name: Human-readable name of the operation
        log_level: Logging level used for start/completion (DEBUG, INFO, ...)

    Usage:
        @log_operation("repro creation")
        def cmd_create(...):
            pass
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            log = get_logger(func.__module__)
            log_func = getattr(log, log_level.lower())

            log_func(f"Starting {operation_name}", extra={"operation": operation_name})
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"Failed {operation_name}: {e}",
                    extra={"operation": operation_name, "error": str(e)},
                )
                raise
            log_func(
                f"Completed {operation_name}",
                extra={"operation": operation_name, "result": result},
            )
            return result

        return wrapper

    return decorator


def time_execution(
    log_threshold: float = 0.1,
    operation_name: str | None = None,
) -> Callable:
    """
    Measure and log execution time for operations.

    Args:
        log_threshold: Minimum execution time (seconds) to log
        operation_name: Custom operation name (defaults to function name)
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.monotonic()
            try:
                return func(*args, **kwargs)
            finally:
                execution_time = time.monotonic() - start_time
                if execution_time >= log_threshold:
                    op_name = operation_name or func.__name__
                    get_logger(func.__module__).info(
                        f"{op_name} completed in {execution_time:.2f}s",
                        extra={
                            "operation": op_name,
                            "duration_s": round(execution_time, 3),
                        },
                    )

        return wrapper

    return decorator
