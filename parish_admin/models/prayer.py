from __future__ import annotations

from typing import ClassVar, FrozenSet, Optional

from .base import SERVER_FIELDS, ParishRecord


class PrayerIntention(ParishRecord):
    server_fields: ClassVar[FrozenSet[str]] = SERVER_FIELDS | {"submitted_at", "approved_at"}

    intention: str
    requester_name: Optional[str] = None
    requester_email: Optional[str] = None

    is_anonymous: bool = False
    is_approved: bool = False
    is_urgent: bool = False

    submitted_at: Optional[str] = None
    approved_at: Optional[str] = None
    approved_by_username: Optional[str] = None
