from __future__ import annotations

from enum import Enum
from typing import ClassVar, FrozenSet, Optional, Set

from .base import SERVER_FIELDS, ParishRecord


class UserRole(str, Enum):
    """
    Account roles. Values are API-stable strings.

    Everyone except PARISHIONER may use the admin dashboard.
    """

    ADMIN = "admin"
    PRIEST = "priest"
    SECRETARY = "secretary"
    REPORTER = "reporter"
    VICE_SECRETARY = "vice_secretary"
    PARISHIONER = "parishioner"


UNPRIVILEGED_ROLES: Set[UserRole] = {UserRole.PARISHIONER}


def is_privileged(role: Optional[str]) -> bool:
    """
    True when the role may read/write admin data. Unknown or missing roles fail closed.
    """
    if role is None:
        return False
    raw = role.value if isinstance(role, UserRole) else str(role).strip().lower()
    try:
        return UserRole(raw) not in UNPRIVILEGED_ROLES
    except ValueError:
        return False


class User(ParishRecord):
    # last_login is stamped by the auth service
    server_fields: ClassVar[FrozenSet[str]] = SERVER_FIELDS | {"last_login"}

    username: str
    email: str
    role: UserRole = UserRole.PARISHIONER
    is_active: bool = True
    last_login: Optional[str] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
