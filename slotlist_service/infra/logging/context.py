"""Request-scoped fields for log records.

The request id, client address and authenticated user uid are kept in a
``ContextVar``. ``ContextInjectingFilter`` copies them onto each record, so
call sites never have to pass them in ``extra``.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any

_EMPTY: MappingProxyType[str, Any] = MappingProxyType({})

_log_context: ContextVar[MappingProxyType[str, Any]] = ContextVar("log_context", default=_EMPTY)


def set_log_context(**fields: Any) -> None:
    """Merge ``fields`` into the context of the running task.

    Example:
        ```python
        set_log_context(request_id="abc-123")
        set_log_context(user_uid="9d4f...")
        ```
    """
    _log_context.set(MappingProxyType({**_log_context.get(), **fields}))


def get_log_context() -> dict[str, Any]:
    return dict(_log_context.get())


def clear_log_context() -> None:
    _log_context.set(_EMPTY)


class ContextInjectingFilter(logging.Filter):
    """Copy context fields onto records that do not define them yet.

    Installed on the root QueueHandler; it runs in the emitting task, before
    the record is handed to the listener thread.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            record.__dict__.setdefault(key, value)
        return True
