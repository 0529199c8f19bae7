from __future__ import annotations

from enum import Enum
from typing import Optional

from .base import ParishRecord


class AnnouncementType(str, Enum):
    GENERAL = "general"
    URGENT = "urgent"
    EVENT = "event"
    MASS = "mass"


class Announcement(ParishRecord):
    title: str
    content: str = ""
    type: AnnouncementType = AnnouncementType.GENERAL
    is_active: bool = True

    start_date: Optional[str] = None
    end_date: Optional[str] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    created_by_username: Optional[str] = None
