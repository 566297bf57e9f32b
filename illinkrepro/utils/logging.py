"""
Logging utilities for illinkrepro.

Log records go to stderr so that stdout stays reserved for the repro path and
other user-facing output. Two renderings are available: key=value text (default)
and one JSON object per line, selected with ``ILLINKREPRO_LOG_FORMAT=json``.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Any, TextIO

LOGGER_NAME = "illinkrepro"

# Marks the handler owned by configure_logging
_HANDLER_MARK = "_illinkrepro_handler"

_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


def _utc_timestamp(record: logging.LogRecord) -> str:
    ct = time.gmtime(record.created)
    return time.strftime("%Y-%m-%dT%H:%M:%S", ct) + f".{int(record.msecs):03d}Z"


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": _utc_timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "where": f"{record.module}:{record.lineno}",
            "msg": record.getMessage(),
        }
        for key, value in _extra_fields(record).items():
            payload.setdefault(key, value)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, separators=(",", ":"), default=str)


class KeyValueFormatter(logging.Formatter):
    """Key=value text formatter suitable for terminals."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"ts={_utc_timestamp(record)}",
            f"level={record.levelname}",
            f"logger={record.name}",
            f'msg="{record.getMessage()}"',
        ]
        for key, value in _extra_fields(record).items():
            parts.append(f"{key}={json.dumps(value, default=str)}")
        if record.exc_info:
            parts.append(f"exc={json.dumps(self.formatException(record.exc_info))}")
        return " ".join(parts)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the illinkrepro namespace."""
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def level_from_verbosity(verbose: int = 0, quiet: bool = False) -> int:
    """Map -v/-vv/-q command line flags to a logging level."""
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    level: int = logging.WARNING,
    fmt: str | None = None,
    stream: TextIO | None = None,
) -> logging.Handler:
    """
    Configure the illinkrepro logger with a single stream handler.

    - level: numeric logging level
    - fmt: 'json' or 'text'. Defaults from ILLINKREPRO_LOG_FORMAT, then 'text'.
    - stream: destination of log records. Defaults to the current sys.stderr.

    Calling it again replaces the handler installed by the previous call.
    """
    env_fmt = os.environ.get("ILLINKREPRO_LOG_FORMAT", "").strip().lower()
    resolved_fmt = (fmt or env_fmt or "text").lower()
    formatter: logging.Formatter = (
        JsonFormatter() if resolved_fmt == "json" else KeyValueFormatter()
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for old in [h for h in logger.handlers if getattr(h, _HANDLER_MARK, False)]:
        logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.setFormatter(formatter)
    handler.setLevel(level)
    setattr(handler, _HANDLER_MARK, True)
    logger.addHandler(handler)

    # Keep propagation so caplog and embedding applications still see records
    logger.propagate = True
    return handler
