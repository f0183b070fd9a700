"""Static per-route permission declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from slotlist_service.core.acl.constants import PLACEHOLDER_PATTERN
from slotlist_service.core.acl.evaluator import AccessDecision, evaluate_access

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

__all__ = ["RouteACL"]


@dataclass(frozen=True, slots=True, init=False)
class RouteACL:
    """Required permissions declared by a route.

    Built once when the route table is constructed. Patterns are
    deduplicated keeping the first occurrence, so strict routes are not
    tripped up by repeated entries. A blank pattern is a programming error
    and fails at declaration time.

    Attributes:
        permissions: Required permission templates, in declaration order
        strict: Require every pattern instead of any single one

    Example:
        >>> acl = RouteACL(
        ...     ["community.{{communitySlug}}.founder", "community.{{communitySlug}}.leader"]
        ... )
        >>> acl.placeholders
        ('communitySlug',)
        >>> acl.evaluate(["community.sel.leader"], {"communitySlug": "sel"}).allowed
        True
    """

    permissions: tuple[str, ...]
    strict: bool = False

    def __init__(self, permissions: Sequence[str] | str = (), strict: bool = False) -> None:
        if isinstance(permissions, str):
            permissions = (permissions,)

        unique: list[str] = []
        for pattern in permissions:
            if not isinstance(pattern, str) or not pattern.strip():
                msg = f"Route permission patterns must be non-empty strings, got {pattern!r}"
                raise ValueError(msg)
            if pattern not in unique:
                unique.append(pattern)

        object.__setattr__(self, "permissions", tuple(unique))
        object.__setattr__(self, "strict", strict)

    @property
    def is_restricted(self) -> bool:
        return bool(self.permissions)

    @property
    def placeholders(self) -> tuple[str, ...]:
        """Route parameter names referenced by the patterns, in first-use order."""
        names: list[str] = []
        for pattern in self.permissions:
            for name in PLACEHOLDER_PATTERN.findall(pattern):
                if name not in names:
                    names.append(name)
        return tuple(names)

    def evaluate(
        self,
        granted: Iterable[str] | None,
        route_params: Mapping[str, object] | None = None,
    ) -> AccessDecision:
        """Evaluate this declaration for a caller's grants."""
        return evaluate_access(granted, self.permissions, route_params, strict=self.strict)

    def __str__(self) -> str:
        joiner = " & " if self.strict else " | "
        return joiner.join(self.permissions) or "<unrestricted>"
