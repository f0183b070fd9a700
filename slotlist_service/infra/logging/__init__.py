"""Structured logging infrastructure.

Components:
    - configure_logging / setup_logging / shutdown: dictConfig + QueueHandler setup
    - JSONFormatter / redact: JSONL output with trace ids and redaction
    - set_log_context / clear_log_context / ContextInjectingFilter: per-request context
    - get_lazy_logger / LazyLoggerAdapter: lazily evaluated debug output
"""

from __future__ import annotations

from slotlist_service.infra.logging.config import configure_logging, setup_logging, shutdown
from slotlist_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from slotlist_service.infra.logging.formatters import JSONFormatter, redact
from slotlist_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "redact",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
