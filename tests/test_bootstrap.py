from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from parish_admin.database import get_engine, init_db, session_scope
from parish_admin.models import CategoryType, UserRole
from parish_admin.models.tables import CategoryRow, UserAccount
from parish_admin.scripts.bootstrap_db import DEFAULT_CATEGORIES, bootstrap, seed_defaults, verify_password
from parish_admin.scripts.check_db import check_database, run


@pytest.fixture
def engine(tmp_path):
    eng = get_engine(f"sqlite:///{tmp_path / 'data' / 'parish.sqlite'}")
    init_db(eng)
    yield eng
    eng.dispose()


def test_sqlite_folder_is_created(tmp_path):
    eng = get_engine(f"sqlite:///{tmp_path / 'nested' / 'dir' / 'db.sqlite'}")
    init_db(eng)
    assert (tmp_path / "nested" / "dir" / "db.sqlite").exists()
    eng.dispose()


def test_seed_defaults_creates_accounts_and_categories(engine):
    with session_scope(engine) as session:
        created = seed_defaults(session, admin_password="a-pass", parishioner_password="p-pass", rounds=4)

    assert created == {"users": 2, "categories": len(DEFAULT_CATEGORIES)}

    with session_scope(engine) as session:
        users = {u.username: u for u in session.exec(select(UserAccount)).all()}
        assert set(users) == {"admin", "parishioner"}
        admin = users["admin"]
        assert admin.email == "admin@stpatricks.com"
        assert admin.role == UserRole.ADMIN
        assert admin.first_name == "System"
        assert admin.password_hash != "a-pass"
        assert verify_password("a-pass", admin.password_hash)
        assert verify_password("p-pass", users["parishioner"].password_hash)
        assert users["parishioner"].role == UserRole.PARISHIONER

        categories = session.exec(select(CategoryRow)).all()
        assert len(categories) == 11
        sacraments = sorted(c.name for c in categories if c.type == CategoryType.SACRAMENT)
        assert sacraments == ["Baptism", "Confirmation", "Marriage"]


def test_seed_defaults_is_idempotent(engine):
    with session_scope(engine) as session:
        seed_defaults(session, rounds=4)
    with session_scope(engine) as session:
        again = seed_defaults(session, rounds=4)
    assert again == {"users": 0, "categories": 0}


def test_default_passwords_come_from_settings(engine, monkeypatch):
    from parish_admin.config import settings

    monkeypatch.setattr(settings, "default_admin_password", "from-env")
    with session_scope(engine) as session:
        seed_defaults(session, rounds=4)
    with session_scope(engine) as session:
        admin = session.exec(select(UserAccount).where(UserAccount.username == "admin")).one()
        assert verify_password("from-env", admin.password_hash)


def test_empty_default_passwords_are_rejected(engine, monkeypatch):
    from parish_admin.config import settings

    monkeypatch.setattr(settings, "default_admin_password", "")
    with pytest.raises(RuntimeError, match="DEFAULT_ADMIN_PASSWORD"):
        with session_scope(engine) as session:
            seed_defaults(session, rounds=4)
    with session_scope(engine) as session:
        assert session.exec(select(UserAccount)).first() is None


def test_existing_admin_skips_default_accounts(engine):
    with session_scope(engine) as session:
        session.add(UserAccount(username="fr.tom", email="tom@x.org", password_hash="x", role=UserRole.ADMIN))
    with session_scope(engine) as session:
        created = seed_defaults(session, rounds=4)
    assert created["users"] == 0


def test_category_name_and_type_are_unique(engine):
    with session_scope(engine) as session:
        session.add(CategoryRow(name="Choir", type=CategoryType.MINISTRY))

    # same name, different type is fine
    with session_scope(engine) as session:
        session.add(CategoryRow(name="Choir", type=CategoryType.NEWS))

    with pytest.raises(IntegrityError):
        with session_scope(engine) as session:
            session.add(CategoryRow(name="Choir", type=CategoryType.MINISTRY))


def test_usernames_are_unique(engine):
    with session_scope(engine) as session:
        session.add(UserAccount(username="mary", email="m1@x.org", password_hash="x"))
    with pytest.raises(IntegrityError):
        with session_scope(engine) as session:
            session.add(UserAccount(username="mary", email="m2@x.org", password_hash="x"))


def test_check_database_reports_counts(engine):
    with session_scope(engine) as session:
        seed_defaults(session, rounds=4)
        for i in range(5):
            session.add(UserAccount(username=f"user{i}", email=f"user{i}@x.org", password_hash="x"))

    with session_scope(engine) as session:
        report = check_database(session)
    assert report.total_users == 7
    assert len(report.recent_users) == 5
    assert {"username", "email", "created_at"} <= set(report.recent_users[0])
    assert "password_hash" not in report.recent_users[0]


def test_bootstrap_then_run_check(engine):
    created = bootstrap(engine)
    assert created["users"] == 2
    report = run(engine)
    assert report.total_users == 2
    assert {u["username"] for u in report.recent_users} == {"admin", "parishioner"}
