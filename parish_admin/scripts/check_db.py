from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from ..config import settings
from ..database import init_db, session_scope
from ..models.tables import UserAccount

logger = logging.getLogger(__name__)


@dataclass
class DatabaseReport:
    total_users: int
    recent_users: List[Dict[str, Any]] = field(default_factory=list)


def check_database(session: Session, limit: int = 5) -> DatabaseReport:
    """
    Read-only: user count plus the most recently created accounts.
    """
    total = session.exec(select(func.count()).select_from(UserAccount)).one()
    recent = session.exec(
        select(UserAccount).order_by(UserAccount.created_at.desc()).limit(limit)
    ).all()
    return DatabaseReport(
        total_users=int(total),
        recent_users=[
            u.model_dump(include={"id", "username", "email", "first_name", "last_name", "created_at"})
            for u in recent
        ],
    )


def run(engine: Optional[Engine] = None) -> DatabaseReport:
    eng = init_db(engine, create_tables=False)
    with session_scope(eng) as session:
        report = check_database(session)
        logger.info("Total users: %d", report.total_users)
        for u in report.recent_users:
            logger.info("  - %s (%s) created %s", u["username"], u["email"], u["created_at"])
        return report


def main() -> None:
    logging.basicConfig(level=settings.log_level)
    try:
        run()
    except Exception:
        logging.exception("Database check failed.")
        print("\n❌ Database check failed.")
        print("   Most common causes:")
        print("   - DATABASE_URL / DB_PATH points at the wrong database")
        print("   - Tables missing (run: python -m parish_admin.scripts.bootstrap_db)\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
