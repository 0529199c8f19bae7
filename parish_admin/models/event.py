from __future__ import annotations

from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

from .base import SERVER_FIELDS, ParishRecord
from .dates import parse_timestamp


class Event(ParishRecord):
    """
    A parish event.

    current_attendees is maintained by the server (registrations) and category_name
    is a join, so neither is ever sent back.
    """

    server_fields: ClassVar[FrozenSet[str]] = SERVER_FIELDS | {"current_attendees", "category_name"}

    title: str
    description: Optional[str] = None
    event_date: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None

    category_id: Optional[str] = None
    category_name: Optional[str] = None
    image_url: Optional[str] = None

    is_published: bool = False
    max_attendees: Optional[int] = None
    current_attendees: int = 0

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    created_by_username: Optional[str] = None

    @property
    def starts_on(self) -> Optional[datetime]:
        return parse_timestamp(self.event_date)
