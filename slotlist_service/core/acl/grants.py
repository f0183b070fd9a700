"""Classification of granted permission strings.

Every grant is exactly one of three kinds, checked in this precedence:

1. ``Wildcard``   - the literal ``*``, grants everything
2. ``SuperAdmin`` - the literal ``admin.superadmin``, grants everything
3. ``Exact``      - an ordinary dotted permission

Keeping the variant explicit lets the evaluator short-circuit on the
bypass grants without scattering string comparisons around.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from slotlist_service.core.acl.constants import GLOBAL_WILDCARD, SUPERADMIN_PERMISSION

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = [
    "Exact",
    "Grant",
    "SuperAdmin",
    "Wildcard",
    "bypass_grant",
    "classify_grant",
]


@dataclass(frozen=True, slots=True)
class Wildcard:
    """Global ``*`` grant."""

    reason = "wildcard"

    def __str__(self) -> str:
        return GLOBAL_WILDCARD


@dataclass(frozen=True, slots=True)
class SuperAdmin:
    """``admin.superadmin`` grant."""

    reason = "superadmin"

    def __str__(self) -> str:
        return SUPERADMIN_PERMISSION


@dataclass(frozen=True, slots=True)
class Exact:
    """Ordinary dotted permission grant."""

    path: str

    def __str__(self) -> str:
        return self.path


Grant = Wildcard | SuperAdmin | Exact


def classify_grant(grant: str) -> Grant:
    """Classify a single granted permission string.

    Args:
        grant: Raw permission string from the caller's grant set

    Returns:
        The matching grant variant
    """
    if grant == GLOBAL_WILDCARD:
        return Wildcard()
    if grant == SUPERADMIN_PERMISSION:
        return SuperAdmin()
    return Exact(grant)


def bypass_grant(grants: Iterable[str]) -> Wildcard | SuperAdmin | None:
    """Return the strongest bypass grant present, if any.

    The global wildcard wins over the superadmin marker so the reported
    reason is stable regardless of grant order.

    Args:
        grants: Raw permission strings

    Returns:
        Wildcard, SuperAdmin or None when only exact grants are present
    """
    found: Wildcard | SuperAdmin | None = None
    for grant in grants:
        classified = classify_grant(grant)
        if isinstance(classified, Wildcard):
            return classified
        if isinstance(classified, SuperAdmin):
            found = classified
    return found
