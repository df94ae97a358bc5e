"""JSON log lines on stderr.

Each record becomes one object: timestamp, level, logger and message, then
the bound run context (``repo``, ``pr_number``, ``label``, ``run_id``) and
finally the event fields passed as ``extra={"extra": {...}}``::

    log = get_logger("labels", repo="octo/widgets", pr_number=7)
    log.info("label_created", extra={"label": "feat", "extra": {"color": "32e52f"}})

stdout belongs to workflow commands (``::error::``), so nothing logs there.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

CONTEXT_KEYS = ("repo", "pr_number", "label", "run_id")


class JsonFormatter(logging.Formatter):
    def __init__(self, context_keys: Iterable[str] = CONTEXT_KEYS) -> None:
        super().__init__()
        self.context_keys = tuple(context_keys)

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key))
            for key in self.context_keys
            if getattr(record, key, None) is not None
        )

        event_fields = getattr(record, "extra", None)
        if isinstance(event_fields, dict):
            payload.update(event_fields)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


_handler: Optional[logging.Handler] = None


def configure_logging() -> logging.Handler:
    """Install the JSON stderr handler on the root logger, once per process."""
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(JsonFormatter())
        root = logging.getLogger()
        root.handlers = [_handler]
        root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    return _handler


class ContextAdapter(logging.LoggerAdapter):
    # per-call extra wins over the bound context
    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str, **context: Any) -> ContextAdapter:
    configure_logging()
    return ContextAdapter(logging.getLogger(name), context)
