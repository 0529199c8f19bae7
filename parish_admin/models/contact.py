from __future__ import annotations

from typing import Optional

from .base import ParishRecord


class ContactInfo(ParishRecord):
    """
    Parish contact singleton. The server keeps at most one row and never exposes an id.
    """

    id: Optional[str] = None  # type: ignore[assignment]

    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None

    office_hours_weekday: Optional[str] = None
    office_hours_saturday: Optional[str] = None
    office_hours_sunday: Optional[str] = None

    updated_at: Optional[str] = None
    updated_by_username: Optional[str] = None
