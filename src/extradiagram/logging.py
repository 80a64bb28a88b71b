"""Loguru configuration for applications embedding the codec.

The library itself only logs through `from loguru import logger` and never
installs handlers. Applications call setup_logging() once to choose between
JSON lines and a colorized console format; both include the id of the codec
session that emitted the record, so warnings from one document can be
grouped.
"""

from __future__ import annotations

import json
import sys
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, TextIO

from loguru import logger

from .config import CodecSettings, get_settings

# Id of the codec session currently encoding or decoding
session_id_ctx: ContextVar[str | None] = ContextVar("session_id", default=None)


def _record_to_dict(record: Any) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "time": datetime.now(UTC).isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "source": f"{record['name']}:{record['function']}:{record['line']}",
    }

    session_id = session_id_ctx.get()
    if session_id:
        entry["session_id"] = session_id

    for key, value in record["extra"].items():
        entry.setdefault(key, value)

    exception = record["exception"]
    if exception:
        entry["error"] = {
            "type": exception.type.__name__ if exception.type else None,
            "message": str(exception.value) if exception.value else None,
        }
    return entry


def _json_formatter(record: Any) -> str:
    # Loguru treats the result as a format string
    line = json.dumps(_record_to_dict(record), default=str)
    return line.replace("{", "{{").replace("}", "}}") + "\n"


def _console_formatter(_record: Any) -> str:
    session_id = session_id_ctx.get()
    session = f"<magenta>{session_id[:8]}</magenta> | " if session_id else ""
    return (
        "<green>{time:HH:mm:ss.SSS}</green> <level>{level: <7}</level> "
        "<cyan>{name}:{line}</cyan> | " + session + "<level>{message}</level>\n{exception}"
    )


def setup_logging(
    settings: CodecSettings | None = None,
    *,
    json_logs: bool | None = None,
    log_level: str | None = None,
    sink: TextIO | None = None,
) -> int:
    """Replace loguru's handlers with one configured from the codec settings.

    Args:
        settings: Source of log_level and json_logs; defaults to get_settings()
        json_logs: Override settings.json_logs
        log_level: Override settings.log_level
        sink: Stream to write to; defaults to sys.stderr

    Returns:
        The loguru handler id
    """
    settings = settings or get_settings()
    use_json = settings.json_logs if json_logs is None else json_logs
    level = (log_level or settings.log_level).upper()

    logger.remove()
    if use_json:
        return logger.add(sink or sys.stderr, format=_json_formatter, level=level)
    return logger.add(sink or sys.stderr, format=_console_formatter, level=level, colorize=True)


__all__ = [
    "logger",
    "session_id_ctx",
    "setup_logging",
]
