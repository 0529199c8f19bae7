from __future__ import annotations

from parish_admin.config import Settings


def test_defaults(monkeypatch):
    for name in ("PARISH_API_BASE", "LOG_LEVEL", "PARISH_ACTOR_ROLE", "DATABASE_URL", "DB_PATH"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.api_base == "http://localhost:5000/api"
    assert s.actor_role == "admin"
    assert s.http_timeout_s == 20.0
    assert s.resolved_database_url == "sqlite:///./data/parish.sqlite"


def test_env_values_are_normalized(monkeypatch):
    monkeypatch.setenv("PARISH_API_BASE", " https://parish.example.org/api/ ")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("PARISH_ACTOR_ROLE", " Secretary ")
    monkeypatch.setenv("PARISH_HTTP_TIMEOUT", "-3")
    s = Settings(_env_file=None)
    assert s.api_base == "https://parish.example.org/api"
    assert s.log_level == "DEBUG"
    assert s.actor_role == "secretary"
    assert s.http_timeout_s == 20.0


def test_database_url_resolution(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    assert Settings(_env_file=None, DB_PATH="/var/lib/parish.sqlite").resolved_database_url == (
        "sqlite:////var/lib/parish.sqlite"
    )
    assert Settings(_env_file=None, DB_PATH="sqlite:///:memory:").resolved_database_url == "sqlite:///:memory:"
    assert (
        Settings(_env_file=None, DATABASE_URL="mysql+pymysql://root@localhost/st_patricks_db").resolved_database_url
        == "mysql+pymysql://root@localhost/st_patricks_db"
    )
