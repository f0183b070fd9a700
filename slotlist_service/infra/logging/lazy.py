"""Deferred log messages.

``repository.User`` debug lines and grant dumps are built from lambdas so
the formatting work is skipped entirely unless DEBUG is on.
"""

from __future__ import annotations

import logging
from typing import Any


def _resolve(value: Any) -> Any:
    return value() if callable(value) else value


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Adapter accepting zero-argument callables as message or arguments.

    Example:
        ```python
        log = get_lazy_logger(__name__)
        log.debug(lambda: f"grants={sorted(grants)}")
        ```
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(level):
            super().log(level, _resolve(msg), *map(_resolve, args), **kwargs)


def get_lazy_logger(name: str, **extra: Any) -> LazyLoggerAdapter:
    """Wrap ``logging.getLogger(name)``; ``extra`` is bound to every record."""
    return LazyLoggerAdapter(logging.getLogger(name), extra)
