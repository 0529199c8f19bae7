from __future__ import annotations

from typing import Optional

from .base import ParishRecord


class Ministry(ParishRecord):
    name: str
    description: Optional[str] = None
    leader_name: Optional[str] = None
    leader_contact: Optional[str] = None
    meeting_schedule: Optional[str] = None
    requirements: Optional[str] = None
    is_active: bool = True

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    created_by_username: Optional[str] = None
