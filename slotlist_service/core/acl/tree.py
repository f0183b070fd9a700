"""Parsed permission tree.

Turns a flat list of granted permission strings into a nested, read-only
structure keyed by dot-separated segments:

    ["community.sel.founder", "community.sel.leader", "admin.announcement"]

    community
    └── sel
        ├── founder  (terminal)
        └── leader   (terminal)
    admin
    └── announcement (terminal)

Lookups succeed only when the full path ends on a terminal node. Granting
``a.b.c`` does not grant ``a.b``, and suffix wildcards such as ``a.*`` are
not interpreted: grants are always exact leaves. The only wildcard is the
whole grant ``*`` which sets the tree's global-allow flag.

Trees are built fresh for every evaluation and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from slotlist_service.core.acl.constants import GLOBAL_WILDCARD, PERMISSION_SEPARATOR

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

__all__ = ["PermissionTree", "has_permission_path", "parse_permissions"]


@dataclass(frozen=True, slots=True)
class PermissionNode:
    """Single segment in the permission tree.

    Attributes:
        terminal: The path ending at this node is granted
        children: Child nodes keyed by the next segment
    """

    terminal: bool = False
    children: Mapping[str, PermissionNode] = field(
        default_factory=lambda: MappingProxyType({})
    )


@dataclass(frozen=True, slots=True)
class PermissionTree:
    """Read-only permission tree built by :func:`parse_permissions`.

    Attributes:
        global_allow: The grant set contained ``*``
        root: Top-level segments
    """

    global_allow: bool = False
    root: Mapping[str, PermissionNode] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def has(self, path: str) -> bool:
        """Check whether ``path`` is granted.

        Args:
            path: Dotted permission string to look up

        Returns:
            True if the global-allow flag is set or the full path ends on
            a terminal node
        """
        if self.global_allow:
            return True

        level = self.root
        node: PermissionNode | None = None
        for segment in path.split(PERMISSION_SEPARATOR):
            node = level.get(segment)
            if node is None:
                return False
            level = node.children

        return node is not None and node.terminal

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.has(path)

    def __bool__(self) -> bool:
        return self.global_allow or bool(self.root)


def _split_grant(grant: str) -> list[str] | None:
    """Split a grant into segments, or None if any segment is empty.

    Blank grants and grants with leading, trailing or double dots are
    dropped so they can never match any lookup.
    """
    segments = grant.split(PERMISSION_SEPARATOR)
    if not all(segment.strip() for segment in segments):
        return None
    return segments


def _freeze(level: dict[str, dict]) -> Mapping[str, PermissionNode]:
    return MappingProxyType(
        {
            segment: PermissionNode(
                terminal=entry["terminal"],
                children=_freeze(entry["children"]),
            )
            for segment, entry in level.items()
        }
    )


def parse_permissions(grants: Iterable[str] | None) -> PermissionTree:
    """Parse granted permission strings into a :class:`PermissionTree`.

    Duplicates are ignored and order is irrelevant. Never raises; a
    missing grant set is treated as empty.

    Args:
        grants: Granted permission strings

    Returns:
        New read-only permission tree

    Example:
        >>> tree = parse_permissions(["mission.all-of-altis.creator"])
        >>> tree.has("mission.all-of-altis.creator")
        True
        >>> tree.has("mission.all-of-altis")
        False
    """
    global_allow = False
    building: dict[str, dict] = {}

    for grant in grants or ():
        if grant == GLOBAL_WILDCARD:
            global_allow = True
            continue

        segments = _split_grant(grant)
        if segments is None:
            continue

        level = building
        for segment in segments:
            entry = level.setdefault(segment, {"terminal": False, "children": {}})
            level = entry["children"]
        entry["terminal"] = True

    return PermissionTree(global_allow=global_allow, root=_freeze(building))


def has_permission_path(tree: PermissionTree, path: str) -> bool:
    """Functional alias for :meth:`PermissionTree.has`."""
    return tree.has(path)
