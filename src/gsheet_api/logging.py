"""Logging configuration for gsheet_api.

The library logs through loguru and never configures sinks on import.
Applications (and the CLI) call ``configure_logging`` to choose between
human-readable colored output and JSON lines.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from typing import TextIO

# Standard library loggers of the HTTP and auth stack
THIRD_PARTY_LOGGERS = ("httpx", "httpcore", "google.auth")


def _to_json_line(record: dict[str, Any]) -> str:
    """Render a loguru record as one JSON object.

    Bound ``extra`` fields (e.g. ``spreadsheet_id``) become top-level keys.
    Warnings and errors also carry their source location.
    """
    entry: dict[str, Any] = {
        "time": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": record["name"],
        "message": record["message"],
    }

    if record["level"].no >= logger.level("WARNING").no:
        entry["location"] = f"{record['function']}:{record['line']}"

    exception = record["exception"]
    if exception is not None:
        entry["exception"] = {
            "type": exception.type.__name__ if exception.type else None,
            "value": str(exception.value) if exception.value else None,
            "traceback": (
                "".join(
                    traceback.format_exception(
                        exception.type, exception.value, exception.traceback
                    )
                )
                if exception.traceback
                else None
            ),
        }

    entry.update(
        (key, value)
        for key, value in record.get("extra", {}).items()
        if not key.startswith("_")
    )
    return json.dumps(entry, default=str)


def configure_logging(
    *,
    json_output: bool = False,
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Replace loguru sinks with a single sink on ``stream``.

    Args:
        json_output: Write JSON lines instead of colored text.
        log_level: Minimum level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Destination, stderr by default.
    """
    out = stream or sys.stderr
    logger.remove()

    if json_output:

        def write_json(message: Any) -> None:
            out.write(_to_json_line(message.record) + "\n")
            out.flush()

        logger.add(
            write_json,
            level=log_level,
            format="{message}",
            backtrace=False,
            diagnose=False,
        )
    else:
        logger.add(
            out,
            level=log_level,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level>"
            ),
            colorize=out.isatty(),
        )

    _route_third_party_logs(log_level)


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging module frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _route_third_party_logs(log_level: str) -> None:
    # stdlib logging has no TRACE level
    std_level = "DEBUG" if log_level == "TRACE" else log_level
    for name in THIRD_PARTY_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.setLevel(std_level)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
