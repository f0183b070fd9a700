"""JSON Lines formatter.

One object per line: ``timestamp`` (UTC, millisecond precision, ``Z``
suffix), ``level``, ``logger``, ``message``, the active OpenTelemetry
``trace_id``/``span_id`` and every extra attribute on the record. Tokens
and passwords are masked; announcement and mission bodies are dropped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from opentelemetry import trace

REDACTED = "***REDACTED***"
SNIPPED = "***SNIP***"

REDACTED_KEYS = frozenset({"authorization", "jwt", "password", "secret", "token"})
SNIPPED_KEYS = frozenset({"collapsed_description", "content", "detailed_description", "image"})

# Attributes every LogRecord has; anything else came from extra= or a filter
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message"}


def redact(value: Any, key: str | None = None) -> Any:
    """Return ``value`` with sensitive members masked, walking dicts and sequences.

    >>> redact({"headers": {"Authorization": "JWT abc"}, "title": "Hi"})
    {'headers': {'Authorization': '***REDACTED***'}, 'title': 'Hi'}
    """
    lowered = key.lower() if key is not None else None
    if lowered in REDACTED_KEYS:
        return REDACTED
    if lowered in SNIPPED_KEYS and value is not None:
        return SNIPPED
    if isinstance(value, Mapping):
        return {k: redact(v, str(k)) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [redact(item) for item in value]
    return value


def _timestamp(created: float) -> str:
    stamp = datetime.fromtimestamp(created, tz=UTC).isoformat(timespec="milliseconds")
    return stamp.removesuffix("+00:00") + "Z"


def _trace_fields() -> dict[str, str]:
    context = trace.get_current_span().get_span_context()
    if not context.is_valid:
        return {}
    return {"trace_id": format(context.trace_id, "032x"), "span_id": format(context.span_id, "016x")}


class JSONFormatter(logging.Formatter):
    """Format records as single-line JSON.

    Args:
        fmt_keys: Output key to LogRecord attribute, defaults to
            level/logger/message.
        static: Fields added to every line, e.g. ``{"service": "slotlist-service"}``.
    """

    DEFAULT_KEYS = {"level": "levelname", "logger": "name", "message": "message"}

    def __init__(
        self,
        fmt_keys: dict[str, str] | None = None,
        static: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.fmt_keys = fmt_keys or dict(self.DEFAULT_KEYS)
        self.static = static or {}

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()

        data: dict[str, Any] = {key: getattr(record, attr, None) for key, attr in self.fmt_keys.items()}
        data["timestamp"] = _timestamp(record.created)
        data.update(_trace_fields())
        # json.dumps escapes newlines inside strings, so tracebacks stay on one line
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            data["stack_trace"] = record.stack_info
        data.update(self.static)

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in data:
                data[key] = redact(value, key)

        return json.dumps(data, ensure_ascii=False, default=str)
