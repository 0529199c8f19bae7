from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .category import CategoryType
from .dates import utcnow
from .user import UserRole


def new_id() -> str:
    return str(uuid.uuid4())


class UserAccount(SQLModel, table=True):
    """
    Login account row provisioned by the bootstrap script.

    Notes:
    - id is a UUID string, matching what the REST API hands out.
    - phone is optional but unique when present.
    - password_hash is a bcrypt hash; plaintext never touches the table.
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    username: str = Field(index=True, unique=True, max_length=50)
    email: str = Field(index=True, unique=True, max_length=100)
    phone: Optional[str] = Field(default=None, unique=True, max_length=20)
    password_hash: str = Field(max_length=255)

    first_name: Optional[str] = Field(default=None, max_length=50)
    last_name: Optional[str] = Field(default=None, max_length=50)

    role: UserRole = Field(default=UserRole.PARISHIONER, index=True)
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    last_login: Optional[datetime] = None


class CategoryRow(SQLModel, table=True):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("name", "type", name="unique_category_type"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    name: str = Field(max_length=100)
    type: CategoryType = Field(index=True)
    description: Optional[str] = None
    is_active: bool = True

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
