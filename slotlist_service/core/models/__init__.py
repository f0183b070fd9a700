"""Database models package.

Import all models here so ``Base.metadata`` knows every table before
``create_all`` runs.
"""

from __future__ import annotations

from slotlist_service.features.announcements.models import Announcement
from slotlist_service.features.notifications.models import Notification
from slotlist_service.features.slot_templates.models import MissionSlotTemplate

from .permission import Permission
from .user import User

__all__ = ["Announcement", "MissionSlotTemplate", "Notification", "Permission", "User"]
