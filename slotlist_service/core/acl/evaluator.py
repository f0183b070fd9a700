"""Access decision evaluator.

Decides whether a caller's granted permissions satisfy the permissions a
route requires. The evaluation order is fixed:

1. No required patterns -> allowed (``unrestricted``)
2. ``*`` granted -> allowed (``wildcard``)
3. ``admin.superadmin`` granted -> allowed (``superadmin``)
4. Resolve ``{{param}}`` placeholders from the route parameters
5. Match each resolved pattern against the parsed grants
6. Strict: every pattern must match. Otherwise: at least one must match.

The evaluator is a pure function. It performs no I/O, holds no state and
never raises; a deny is an ordinary return value which the HTTP layer turns
into a 403 response. Authentication is checked by the caller beforehand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from slotlist_service.core.acl.constants import PLACEHOLDER_PATTERN
from slotlist_service.core.acl.grants import bypass_grant
from slotlist_service.core.acl.tree import parse_permissions

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

__all__ = [
    "REASON_DENIED",
    "REASON_MATCHED",
    "REASON_UNRESTRICTED",
    "AccessDecision",
    "evaluate_access",
    "resolve_pattern",
]

REASON_UNRESTRICTED = "unrestricted"
REASON_MATCHED = "matched"
REASON_DENIED = "denied"


@dataclass(frozen=True, slots=True)
class AccessDecision:
    """Outcome of a single access evaluation.

    Attributes:
        allowed: Whether the request may proceed
        reason: One of ``unrestricted``, ``wildcard``, ``superadmin``,
            ``matched`` or ``denied``
        strict: Strictness the decision was made with
        required: Resolved required patterns, in declaration order
        matched: Resolved patterns satisfied by the grants, in order
        missing: Resolved patterns not satisfied by the grants, in order
    """

    allowed: bool
    reason: str
    strict: bool = False
    required: tuple[str, ...] = field(default_factory=tuple)
    matched: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return self.allowed

    def as_log_extra(self) -> dict[str, object]:
        """Fields suitable for ``extra=`` on a log call."""
        return {
            "acl_allowed": self.allowed,
            "acl_reason": self.reason,
            "acl_strict": self.strict,
            "acl_required": list(self.required),
            "acl_matched": list(self.matched),
            "acl_missing": list(self.missing),
        }


def resolve_pattern(pattern: str, route_params: Mapping[str, object] | None) -> str:
    """Substitute ``{{name}}`` placeholders with route parameter values.

    Substitution happens in a single pass over the pattern, so a value
    that itself looks like a placeholder is inserted verbatim. Placeholders
    without a matching route parameter are left as they are, so the pattern
    can never match a real grant.

    Args:
        pattern: Required permission template
        route_params: Route path parameters

    Returns:
        Resolved permission string

    Example:
        >>> resolve_pattern("mission.{{missionSlug}}.creator", {"missionSlug": "all-of-altis"})
        'mission.all-of-altis.creator'
        >>> resolve_pattern("mission.{{missionSlug}}.creator", {})
        'mission.{{missionSlug}}.creator'
    """
    if not route_params:
        return pattern

    return PLACEHOLDER_PATTERN.sub(
        lambda match: str(route_params[match[1]]) if match[1] in route_params else match[0],
        pattern,
    )


def evaluate_access(
    granted: Iterable[str] | None,
    required: Sequence[str],
    route_params: Mapping[str, object] | None = None,
    *,
    strict: bool = False,
) -> AccessDecision:
    """Evaluate required permission patterns against granted permissions.

    Patterns are not deduplicated here; a duplicated pattern counts twice
    towards the strict requirement.

    Args:
        granted: Caller's granted permission strings, ``None`` is treated
            as an empty set
        required: Route's required permission patterns
        route_params: Route path parameters used for placeholder resolution
        strict: Require every pattern instead of any single one

    Returns:
        The access decision with matched/missing diagnostics

    Example:
        >>> decision = evaluate_access(
        ...     ["community.sel.founder"],
        ...     ["community.{{communitySlug}}.founder", "community.{{communitySlug}}.leader"],
        ...     {"communitySlug": "sel"},
        ... )
        >>> decision.allowed, decision.matched
        (True, ('community.sel.founder',))
    """
    if not required:
        return AccessDecision(allowed=True, reason=REASON_UNRESTRICTED, strict=strict)

    grants = tuple(granted or ())
    tree = parse_permissions(grants)

    bypass = bypass_grant(grants)
    if bypass is not None:
        return AccessDecision(allowed=True, reason=bypass.reason, strict=strict)

    resolved = tuple(resolve_pattern(pattern, route_params) for pattern in required)
    matched = tuple(pattern for pattern in resolved if tree.has(pattern))
    missing = tuple(pattern for pattern in resolved if pattern not in matched)

    allowed = len(matched) == len(resolved) if strict else len(matched) > 0

    return AccessDecision(
        allowed=allowed,
        reason=REASON_MATCHED if allowed else REASON_DENIED,
        strict=strict,
        required=resolved,
        matched=matched,
        missing=missing,
    )
