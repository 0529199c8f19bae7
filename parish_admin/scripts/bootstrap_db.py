from __future__ import annotations

import logging
from typing import Dict, List, Optional

import bcrypt
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from ..config import settings
from ..database import init_db, session_scope
from ..models import CategoryType, UserRole
from ..models.dates import utcnow
from ..models.tables import CategoryRow, UserAccount

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12

DEFAULT_CATEGORIES: List[Dict[str, str]] = [
    {"name": "Liturgy", "type": "news", "description": "Mass schedules, liturgical celebrations"},
    {"name": "Community", "type": "news", "description": "Community events and activities"},
    {"name": "Education", "type": "news", "description": "Religious education and classes"},
    {"name": "Youth", "type": "news", "description": "Youth ministry activities"},
    {"name": "Charity", "type": "news", "description": "Charitable works and donations"},
    {"name": "Events", "type": "event", "description": "Church events and gatherings"},
    {"name": "Announcements", "type": "general", "description": "General announcements"},
    {"name": "Choir", "type": "ministry", "description": "Church choir ministry"},
    {"name": "Baptism", "type": "sacrament", "description": "Baptism sacrament"},
    {"name": "Confirmation", "type": "sacrament", "description": "Confirmation sacrament"},
    {"name": "Marriage", "type": "sacrament", "description": "Marriage sacrament"},
]


def hash_password(plain: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def _default_users(admin_password: str, parishioner_password: str, rounds: int) -> List[UserAccount]:
    if not admin_password or not parishioner_password:
        raise RuntimeError(
            "Default passwords are empty. Set DEFAULT_ADMIN_PASSWORD and DEFAULT_PARISHIONER_PASSWORD."
        )
    return [
        UserAccount(
            username="admin",
            email="admin@stpatricks.com",
            password_hash=hash_password(admin_password, rounds),
            first_name="System",
            last_name="Administrator",
            role=UserRole.ADMIN,
            is_active=True,
        ),
        UserAccount(
            username="parishioner",
            email="parishioner@stpatricks.com",
            password_hash=hash_password(parishioner_password, rounds),
            first_name="Test",
            last_name="Parishioner",
            role=UserRole.PARISHIONER,
            is_active=True,
        ),
    ]


def upsert_category(session: Session, row: Dict[str, str]) -> bool:
    """
    Insert a category unless (name, type) already exists. Existing rows are left untouched.
    Returns True when a row was created.
    """
    ctype = CategoryType(row["type"])
    stmt = select(CategoryRow).where((CategoryRow.name == row["name"]) & (CategoryRow.type == ctype))
    if session.exec(stmt).first() is not None:
        return False

    now = utcnow()
    session.add(
        CategoryRow(
            name=row["name"],
            type=ctype,
            description=row.get("description"),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
    )
    return True


def seed_defaults(
    session: Session,
    *,
    admin_password: Optional[str] = None,
    parishioner_password: Optional[str] = None,
    rounds: int = BCRYPT_ROUNDS,
) -> Dict[str, int]:
    """
    Default accounts (only when no admin exists yet) and default categories.

    Idempotent. Returns how many users/categories were created.
    """
    created = {"users": 0, "categories": 0}

    has_admin = session.exec(select(UserAccount).where(UserAccount.role == UserRole.ADMIN)).first()
    if has_admin is None:
        users = _default_users(
            admin_password or settings.default_admin_password,
            parishioner_password or settings.default_parishioner_password,
            rounds,
        )
        for user in users:
            session.add(user)
        created["users"] = len(users)
        logger.info("Default users created: %s", ", ".join(u.username for u in users))

    for row in DEFAULT_CATEGORIES:
        if upsert_category(session, row):
            created["categories"] += 1

    session.flush()
    return created


def bootstrap(engine: Optional[Engine] = None) -> Dict[str, int]:
    eng = init_db(engine)
    with session_scope(eng) as session:
        return seed_defaults(session)


def main() -> None:
    logging.basicConfig(level=settings.log_level)
    created = bootstrap()
    print(f"Seeded defaults: {created['users']} users, {created['categories']} categories")


if __name__ == "__main__":
    main()
