from __future__ import annotations

from enum import Enum
from typing import Optional

from .base import ParishRecord


class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class ScheduleLanguage(str, Enum):
    ENGLISH = "english"
    ISINDEBELE = "isindebele"
    BOTH = "both"


class ScheduleType(str, Enum):
    MASS = "mass"
    CONFESSION = "confession"
    ADORATION = "adoration"
    ROSARY = "rosary"


class MassScheduleEntry(ParishRecord):
    day_of_week: DayOfWeek
    time: str
    language: ScheduleLanguage = ScheduleLanguage.ENGLISH
    type: ScheduleType = ScheduleType.MASS
    is_active: bool = True

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    updated_by_username: Optional[str] = None
