from __future__ import annotations

from typing import Optional

from .base import ParishRecord


class Sacrament(ParishRecord):
    name: str
    description: Optional[str] = None
    requirements: Optional[str] = None
    preparation_time: Optional[str] = None
    contact_person: Optional[str] = None
    contact_info: Optional[str] = None
    is_active: bool = True

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    created_by_username: Optional[str] = None
