from __future__ import annotations

from typing import ClassVar, FrozenSet, Optional

from .base import SERVER_FIELDS, ParishRecord


class GalleryImage(ParishRecord):
    server_fields: ClassVar[FrozenSet[str]] = SERVER_FIELDS | {"category_name", "event_title"}

    title: str
    description: Optional[str] = None
    image_url: str
    thumbnail_url: Optional[str] = None

    category_id: Optional[str] = None
    category_name: Optional[str] = None
    event_id: Optional[str] = None
    event_title: Optional[str] = None

    is_featured: bool = False
    upload_date: Optional[str] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    created_by_username: Optional[str] = None
