"""Programmatic permission checks for use in business logic.

While ``require_permissions()`` / ``require_acl()`` dependencies are
preferred for route protection, handlers sometimes need to branch on a
permission (e.g. announcement admins seeing not-yet-visible entries, or only
community founders being allowed to hand out the leader role). These helpers
run the same evaluator the route guard uses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from slotlist_service.core.acl.evaluator import evaluate_access
from slotlist_service.core.acl.grants import bypass_grant

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from slotlist_service.core.schemas.auth import AuthUser

__all__ = ["PermissionChecker", "has_permission"]


def has_permission(
    granted: Iterable[str] | None,
    required: str | Sequence[str],
    *,
    strict: bool = False,
    route_params: Mapping[str, object] | None = None,
) -> bool:
    """Boolean shortcut over :func:`evaluate_access`.

    Args:
        granted: Caller's granted permission strings
        required: Single pattern or list of patterns
        strict: Require every pattern instead of any single one
        route_params: Values for ``{{name}}`` placeholders

    Returns:
        True if access would be allowed

    Example:
        >>> has_permission(["admin.announcement"], "admin.announcement")
        True
        >>> has_permission(["community.sel.leader"], ["community.sel.founder"])
        False
    """
    if isinstance(required, str):
        required = [required]
    return evaluate_access(granted, required, route_params, strict=strict).allowed


class PermissionChecker:
    """Reusable permission checker bound to one authenticated user.

    Example:
        >>> checker = PermissionChecker(user)
        >>> if not checker.has("community.{{slug}}.founder", slug=community.slug):
        ...     raise ForbiddenException("Only founders may appoint leaders")
    """

    def __init__(self, user: AuthUser | Any) -> None:
        """Initialize the checker.

        Args:
            user: Authenticated user, or any object exposing ``permissions``
        """
        self.user = user
        self._granted: tuple[str, ...] = tuple(getattr(user, "permissions", None) or ())

    @property
    def granted(self) -> tuple[str, ...]:
        return self._granted

    def has(self, pattern: str, **params: object) -> bool:
        """Check a single pattern, resolving placeholders from ``params``."""
        return has_permission(self._granted, pattern, route_params=params)

    def has_any(self, *patterns: str) -> bool:
        """Check that at least one of the patterns is granted.

        Calling it without patterns grants nothing and returns False.
        """
        return bool(patterns) and has_permission(self._granted, patterns)

    def has_all(self, *patterns: str) -> bool:
        """Check that every pattern is granted.

        Like :meth:`has_any`, an empty call returns False. Only route
        guards treat an empty requirement as open access.
        """
        return bool(patterns) and has_permission(self._granted, patterns, strict=True)

    def is_superadmin(self) -> bool:
        """Check for a grant that bypasses every permission check."""
        return bypass_grant(self._granted) is not None

    def matching(self, *patterns: str) -> list[str]:
        """Return the patterns that are granted, in the order given."""
        return [pattern for pattern in patterns if self.has(pattern)]

    def missing(self, *patterns: str) -> list[str]:
        """Return the patterns that are not granted.

        Useful for error messages explaining missing permissions.
        """
        return [pattern for pattern in patterns if not self.has(pattern)]
