"""Permission string constants and utilities.

Permissions are dot-separated capability identifiers granted to users, e.g.
``community.spezialeinheit-luchs.leader`` or ``mission.all-of-altis.editor``.
Routes declare the permissions they require as templates which may reference
path parameters using double curly braces (``community.{{communitySlug}}.founder``).

Components:
    - GLOBAL_WILDCARD / SUPERADMIN_PERMISSION: grants that bypass every check
    - CommunityRole: role segments of community grants
    - format_permission: Generate permission strings consistently
    - community_permission: Scoped helper
    - validate_permission_format: Validate a granted permission string

Examples:
    >>> community_permission("spezialeinheit-luchs", CommunityRole.LEADER)
    'community.spezialeinheit-luchs.leader'

    >>> validate_permission_format("mission.all-of-altis.creator")
    True

    >>> validate_permission_format("mission..creator")
    False
"""

from __future__ import annotations

import re
from enum import Enum

__all__ = [
    "ADMIN_ANNOUNCEMENT",
    "ADMIN_MISSION",
    "GLOBAL_WILDCARD",
    "PERMISSION_SEPARATOR",
    "PLACEHOLDER_PATTERN",
    "SUPERADMIN_PERMISSION",
    "CommunityRole",
    "community_permission",
    "format_permission",
    "validate_permission_format",
]


# =============================================================================
# Fixed Literals
# =============================================================================

PERMISSION_SEPARATOR = "."

# Grants every permission. Only meaningful as a whole grant string.
GLOBAL_WILDCARD = "*"

# Grants every permission, checked after the global wildcard.
SUPERADMIN_PERMISSION = "admin.superadmin"

ADMIN_ANNOUNCEMENT = "admin.announcement"
ADMIN_MISSION = "admin.mission"

# Route parameter placeholder inside required permission templates: {{paramName}}
PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


# =============================================================================
# Role Segments
# =============================================================================


class CommunityRole(str, Enum):
    """Roles a user can hold within a community.

    - FOUNDER: Created the community, may manage leaders
    - LEADER: Manages members, missions and permissions
    - RECRUITMENT: Processes community applications
    """

    FOUNDER = "founder"
    LEADER = "leader"
    RECRUITMENT = "recruitment"


# =============================================================================
# Formatting Utilities
# =============================================================================


def format_permission(*segments: str | Enum) -> str:
    """Join segments into a dotted permission string.

    Args:
        *segments: Permission segments, enum members are replaced by their value

    Returns:
        Dotted permission string

    Examples:
        >>> format_permission("admin", "announcement")
        'admin.announcement'
    """
    return PERMISSION_SEPARATOR.join(
        str(segment.value) if isinstance(segment, Enum) else segment
        for segment in segments
    )


def community_permission(slug: str, role: str | CommunityRole) -> str:
    """Format a community-scoped permission (``community.<slug>.<role>``)."""
    return format_permission("community", slug, role)


def validate_permission_format(permission: str) -> bool:
    """Validate a permission string before it is stored as a grant.

    A valid permission is either the global wildcard or one or more
    non-empty dot-separated segments without whitespace or braces.
    Placeholders are only valid in route declarations, never in grants.

    Args:
        permission: Permission string to validate

    Returns:
        True if the string may be stored as a grant
    """
    if permission == GLOBAL_WILDCARD:
        return True
    if not permission:
        return False

    for segment in permission.split(PERMISSION_SEPARATOR):
        if not segment or segment != segment.strip():
            return False
        if "{" in segment or "}" in segment:
            return False
        if any(char.isspace() for char in segment):
            return False
    return True
