"""Mission slot templates: reusable slot group layouts owned by their creator."""

from __future__ import annotations

from .models import MissionSlotTemplate, MissionVisibility

__all__ = ["MissionSlotTemplate", "MissionVisibility"]
