from __future__ import annotations

from enum import Enum
from typing import Optional

from .base import ParishRecord


class CategoryType(str, Enum):
    """
    What a category groups. (name, type) is unique server-side.
    """

    NEWS = "news"
    EVENT = "event"
    MINISTRY = "ministry"
    SACRAMENT = "sacrament"
    GENERAL = "general"


class Category(ParishRecord):
    name: str
    type: CategoryType = CategoryType.GENERAL
    description: Optional[str] = None
    is_active: bool = True

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
