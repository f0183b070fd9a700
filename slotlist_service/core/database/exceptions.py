"""Exceptions raised by repositories.

They carry no HTTP semantics; ``app.exception_handlers`` maps them to
problem responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


class RepositoryError(Exception):
    """Base class for persistence failures surfaced by repositories."""


class NotFoundError(RepositoryError):
    """A lookup by key matched no row.

    Attributes:
        model_name: Mapped class name, e.g. ``"Announcement"``
        identifier: Lookup key, e.g. ``{"uid": "..."}``

    Example:
        raise NotFoundError("Permission", {"uid": str(permission_uid)})
    """

    def __init__(self, model_name: str, identifier: Mapping[str, Any]) -> None:
        self.model_name = model_name
        self.identifier = dict(identifier)
        keys = ", ".join(f"{key}={value}" for key, value in self.identifier.items())
        super().__init__(f"{model_name} not found ({keys})")
