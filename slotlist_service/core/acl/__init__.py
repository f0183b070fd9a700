"""Permission evaluation and access-control decisions.

Users are granted flat, dot-separated permission strings which are stored
per user and embedded into the JWT at login. Routes declare the permissions
they require as templates that may reference path parameters:

    community.{{communitySlug}}.founder

Evaluation happens locally and is pure: the caller's grants are parsed into
a tree, the route's templates are resolved against the path parameters and
matched exactly. Two grants bypass every check: the global wildcard ``*``
and the superadmin marker ``admin.superadmin``.

Components:
    Parsing:
        - parse_permissions / PermissionTree: Read-only grant tree
        - classify_grant / bypass_grant: Wildcard, SuperAdmin or Exact

    Evaluation:
        - evaluate_access / AccessDecision: Allow/deny with diagnostics
        - resolve_pattern: ``{{param}}`` substitution
        - RouteACL: Static per-route declaration (patterns + strictness)

    Programmatic Checks:
        - has_permission: Boolean shortcut for handlers
        - PermissionChecker: Checker bound to an authenticated user

    Permission Constants:
        - GLOBAL_WILDCARD / SUPERADMIN_PERMISSION: Bypass literals
        - ADMIN_ANNOUNCEMENT / ADMIN_MISSION: Handler-level admin grants
        - CommunityRole: Community role segments
        - format_permission / community_permission
        - validate_permission_format: Validate a grant before storing it

Matching Semantics:
    - Grants are exact leaves: ``a.b.c`` does not grant ``a.b``
    - No suffix wildcards: ``a.*`` is an ordinary (unmatchable) string
    - Case-sensitive
    - Unknown placeholders stay verbatim and never match

Examples:
    >>> from slotlist_service.core.acl import RouteACL
    >>>
    >>> acl = RouteACL(
    ...     ["community.{{communitySlug}}.founder", "community.{{communitySlug}}.leader"],
    ...     strict=True,
    ... )
    >>> decision = acl.evaluate(["community.sel.founder"], {"communitySlug": "sel"})
    >>> decision.allowed, decision.missing
    (False, ('community.sel.leader',))
"""

from __future__ import annotations

from slotlist_service.core.acl.checker import PermissionChecker, has_permission
from slotlist_service.core.acl.constants import (
    ADMIN_ANNOUNCEMENT,
    ADMIN_MISSION,
    GLOBAL_WILDCARD,
    PERMISSION_SEPARATOR,
    SUPERADMIN_PERMISSION,
    CommunityRole,
    community_permission,
    format_permission,
    validate_permission_format,
)
from slotlist_service.core.acl.evaluator import (
    AccessDecision,
    evaluate_access,
    resolve_pattern,
)
from slotlist_service.core.acl.grants import (
    Exact,
    Grant,
    SuperAdmin,
    Wildcard,
    bypass_grant,
    classify_grant,
)
from slotlist_service.core.acl.requirement import RouteACL
from slotlist_service.core.acl.tree import (
    PermissionTree,
    has_permission_path,
    parse_permissions,
)

__all__ = [
    "ADMIN_ANNOUNCEMENT",
    "ADMIN_MISSION",
    "GLOBAL_WILDCARD",
    "PERMISSION_SEPARATOR",
    "SUPERADMIN_PERMISSION",
    "AccessDecision",
    "CommunityRole",
    "Exact",
    "Grant",
    "PermissionChecker",
    "PermissionTree",
    "RouteACL",
    "SuperAdmin",
    "Wildcard",
    "bypass_grant",
    "classify_grant",
    "community_permission",
    "evaluate_access",
    "format_permission",
    "has_permission",
    "has_permission_path",
    "parse_permissions",
    "resolve_pattern",
    "validate_permission_format",
]
