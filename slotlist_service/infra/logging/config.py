"""Root logger wiring.

Records are put on a queue by a ``QueueHandler`` on the root logger; a
``QueueListener`` thread drains it into the console and file handlers, so
request handlers never block on log I/O. Library loggers propagate to root.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import SimpleQueue
from typing import TYPE_CHECKING, Any

from slotlist_service.infra.logging.context import ContextInjectingFilter
from slotlist_service.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from slotlist_service.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class _State:
    listener: QueueListener | None = None
    handler: QueueHandler | None = None
    configured: bool = False


def shutdown() -> None:
    """Detach the queue handler and flush everything still queued.

    Safe to call repeatedly; registered with ``atexit`` and called on
    application shutdown.
    """
    if _State.handler is not None:
        logging.getLogger().removeHandler(_State.handler)
        _State.handler = None
    if _State.listener is not None:
        _State.listener.stop()
        _State.listener = None
    _State.configured = False


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **overrides: Any,
) -> None:
    """Configure logging from ``LoggingSettings`` unless that already happened.

    Both the CLI entrypoint and the lifespan call this; ``force`` reapplies
    the configuration, and ``overrides`` take precedence over the settings.
    """
    if _State.configured and not force:
        return
    if log_settings is None:
        from slotlist_service.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**{**log_settings.to_logging_kwargs(), **overrides})
    _State.configured = True


def configure_logging(
    log_level: str = "INFO",
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "slotlist-service",
    include_uvicorn: bool = True,
    **unused: Any,
) -> None:
    """Apply a logging configuration, replacing any earlier one.

    Example:
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": log_level.upper(), "handlers": []},
            "loggers": {"uvicorn.access": {"level": "INFO" if include_uvicorn else "WARNING"}},
        }
    )
    logging.captureWarnings(capture_warnings)

    formatter: logging.Formatter = (
        JSONFormatter(static={"service": service_name}) if json_logs else logging.Formatter(TEXT_FORMAT)
    )
    handlers: list[logging.Handler] = []
    if console_enabled:
        handlers.append(logging.StreamHandler())
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path, maxBytes=file_max_bytes, backupCount=file_backup_count, encoding="utf-8"
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)

    _install_queue(handlers, include_context=include_context)

    if unused:
        logger.debug("Ignoring unknown logging options: %s", ", ".join(sorted(unused)))


def _install_queue(handlers: list[logging.Handler], *, include_context: bool) -> None:
    shutdown()
    if not handlers:
        return

    queue: SimpleQueue[logging.LogRecord] = SimpleQueue()
    _State.listener = QueueListener(queue, *handlers, respect_handler_level=True)
    _State.listener.start()
    atexit.unregister(shutdown)
    atexit.register(shutdown)

    _State.handler = QueueHandler(queue)
    if include_context:
        _State.handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(_State.handler)
