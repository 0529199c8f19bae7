from __future__ import annotations

from enum import Enum
from typing import ClassVar, FrozenSet, Optional

from .base import SERVER_FIELDS, ParishRecord


class AuthorRole(str, Enum):
    PRIEST = "priest"
    SECRETARY = "secretary"
    REPORTER = "reporter"
    VICE_SECRETARY = "vice_secretary"


class ParishNews(ParishRecord):
    server_fields: ClassVar[FrozenSet[str]] = SERVER_FIELDS | {"category_name"}

    title: str
    summary: str = ""
    content: str = ""

    category: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    image_url: Optional[str] = None

    author: str = ""
    author_role: AuthorRole = AuthorRole.REPORTER

    is_published: bool = False
    is_archived: bool = False
    published_at: Optional[str] = None
    archived_at: Optional[str] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    created_by_username: Optional[str] = None
