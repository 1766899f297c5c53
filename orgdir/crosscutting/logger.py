"""
===============================================================================
MODULE: Structured (JSON) logger with operation context
===============================================================================

Goal
----
Log lines that are:
- Parseable (one JSON object per line)
- Correlated (operation / operation_id of the directory mutation)
- Safe (emails and secrets redacted, long values truncated)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  JSONFormatter + setup_logger()

Responsibilities:
  - Format LogRecord as JSON
  - Enrich with operation context
  - Redact sensitive fields and bound sizes

Collaborators:
  - orgdir/context.py (ContextVars)
  - crosscutting/config.py (level and format, passed in by the container)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, TextIO

from ..context import get_context_dict

# LogRecord attributes that are NOT copied as "extra".
_INTERNAL_LOGRECORD_KEYS: set[str] = set(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "taskName"}

ROOT_LOGGER_NAME = "orgdir"


class _Redactor:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      _Redactor

    Responsibilities:
      - Redact sensitive keys (personal data included)
      - Truncate huge strings
      - Keep values JSON serializable

    Collaborators:
      - JSONFormatter
    ----------------------------------------------------------------------------
    """

    SENSITIVE_KEYS = {
        "password",
        "secret",
        "token",
        "authorization",
        "api_key",
        "email",
        "emails",
        "profile_image",
    }

    def __init__(self, max_str: int = 4_000, max_depth: int = 4):
        self._max_str = max_str
        self._max_depth = max_depth

    def sanitize(self, value: Any, *, depth: int = 0, key: str | None = None) -> Any:
        if key and key.lower() in self.SENSITIVE_KEYS:
            return "***REDACTED***"

        if depth > self._max_depth:
            return "***TRUNCATED***"

        if isinstance(value, str):
            if len(value) <= self._max_str:
                return value
            return value[: self._max_str] + "...(truncated)"

        if isinstance(value, (bytes, bytearray)):
            return f"<bytes {len(value)}B>"

        if isinstance(value, dict):
            return {
                str(k): self.sanitize(v, depth=depth + 1, key=str(k))
                for k, v in value.items()
            }

        if isinstance(value, (list, tuple, set, frozenset)):
            items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
            return [self.sanitize(v, depth=depth + 1, key=key) for v in items]

        if isinstance(value, (int, float, bool)) or value is None:
            return value

        return str(value)


class JSONFormatter(logging.Formatter):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      JSONFormatter

    Responsibilities:
      - Convert LogRecord -> JSON
      - Add operation context
      - Attach the stacktrace when an exception is logged

    Collaborators:
      - orgdir.context.get_context_dict()
      - _Redactor
    ----------------------------------------------------------------------------
    """

    def __init__(self):
        super().__init__()
        self._redactor = _Redactor()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        payload.update(get_context_dict())

        for k, v in record.__dict__.items():
            if k in _INTERNAL_LOGRECORD_KEYS:
                continue
            payload[k] = self._redactor.sanitize(v, key=k)

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            exc_msg = str(record.exc_info[1]) if record.exc_info[1] else None
            payload["exception"] = {
                "type": exc_type,
                "message": exc_msg,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(
            payload, ensure_ascii=False, default=str, separators=(",", ":")
        )


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    *,
    level: str = "INFO",
    use_json: bool = True,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the package logger.

    - Child loggers (logging.getLogger(__name__)) propagate here.
    - Re-running it updates level/format without duplicating handlers.
    - stream defaults to stdout; CLI tools that print results pass stderr.
    """
    log = logging.getLogger(name)
    log.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter: logging.Formatter = (
        JSONFormatter() if use_json else logging.Formatter("%(levelname)s %(message)s")
    )

    handler = next(
        (h for h in log.handlers if getattr(h, "_orgdir_handler", False)), None
    )
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler._orgdir_handler = True  # type: ignore[attr-defined]
        log.addHandler(handler)
    elif stream is not None:
        handler.setStream(stream)
    handler.setFormatter(formatter)

    return log
