"""Notifications feature: in-app notices about announcements and permission changes."""

from __future__ import annotations

from .models import Notification, NotificationType
from .service import NotificationService

__all__ = ["Notification", "NotificationService", "NotificationType"]
