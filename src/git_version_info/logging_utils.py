"""Structured logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, MutableMapping, Optional

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if hasattr(record, "correlation_id"):
            payload["correlation_id"] = getattr(record, "correlation_id")
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED and key not in payload
        }
        if extras:
            payload.update(extras)
        return json.dumps(payload, ensure_ascii=False, default=str)


class CorrelationAdapter(logging.LoggerAdapter):
    """Attach the correlation id while keeping call-site ``extra``."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def bind(logger: logging.Logger, correlation_id: Optional[str]) -> CorrelationAdapter:
    """Wrap ``logger`` so every record carries ``correlation_id`` when given."""
    return CorrelationAdapter(logger, {"correlation_id": correlation_id} if correlation_id else {})


def setup_logging(correlation_id: str, level: int | str = logging.INFO) -> CorrelationAdapter:
    """Configure the package logger for JSON output on stderr."""
    logger = logging.getLogger("git_version_info")
    for handler in list(logger.handlers):
        if getattr(handler, "_git_version_info", False):
            logger.removeHandler(handler)
    # Bind to the current stderr; callers may have swapped it since the last run.
    handler = logging.StreamHandler(sys.stderr)
    handler._git_version_info = True  # type: ignore[attr-defined]
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return bind(logger, correlation_id)


__all__ = ["CorrelationAdapter", "JsonFormatter", "bind", "setup_logging"]
