from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central settings for the parish admin client.

    Goals:
    - One place for the API base, auth token and HTTP behavior
    - Normalize user-provided values (URLs, log level, role, DB URL)
    - Remain permissive for local dev; every component also accepts explicit args
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # App identity
    env: str = Field(default="local", alias="APP_ENV")
    app_name: str = Field(default="parish-admin", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Parish REST API
    api_base: str = Field(default="http://localhost:5000/api", alias="PARISH_API_BASE")
    api_token: str = Field(default="", alias="PARISH_API_TOKEN")

    # HTTP
    http_timeout_s: float = Field(default=20.0, alias="PARISH_HTTP_TIMEOUT")
    http_user_agent: str = Field(default="parish-admin/1.0", alias="PARISH_HTTP_USER_AGENT")

    # Role of the operator running the CLI (parishioner = no data access)
    actor_role: str = Field(default="admin", alias="PARISH_ACTOR_ROLE")

    # Reports land here
    export_dir: str = Field(default="./exports", alias="EXPORT_DIR")

    # Bootstrap database (MySQL URLs need a driver installed by the operator)
    database_url: str = Field(default="", alias="DATABASE_URL")
    db_path: str = Field(default="./data/parish.sqlite", alias="DB_PATH")

    # Seed accounts
    default_admin_password: str = Field(default="admin123", alias="DEFAULT_ADMIN_PASSWORD")
    default_parishioner_password: str = Field(default="parish123", alias="DEFAULT_PARISHIONER_PASSWORD")

    # -------------------------
    # Validators / normalizers
    # -------------------------

    @field_validator("log_level", mode="before")
    @classmethod
    def _norm_log_level(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().upper()
        return s or "INFO"

    @field_validator("api_base", mode="before")
    @classmethod
    def _norm_api_base(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().rstrip("/")
        return s or "http://localhost:5000/api"

    @field_validator("api_token", "http_user_agent", "database_url", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> str:
        return ("" if v is None else str(v)).strip()

    @field_validator("actor_role", mode="before")
    @classmethod
    def _norm_actor_role(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().lower()
        return s or "admin"

    @field_validator("http_timeout_s", mode="before")
    @classmethod
    def _norm_timeout(cls, v: Any) -> float:
        try:
            t = float(v)
        except Exception:
            return 20.0
        return t if t > 0 else 20.0

    @field_validator("db_path", mode="before")
    @classmethod
    def _norm_db_path(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "./data/parish.sqlite"

    # -------------------------
    # Derived helpers
    # -------------------------

    @property
    def is_prod(self) -> bool:
        return str(self.env).strip().lower() in ("prod", "production")

    @property
    def export_path(self) -> Path:
        return Path(self.export_dir or "./exports")

    @property
    def resolved_database_url(self) -> str:
        """
        Priority:
        1) DATABASE_URL if provided
        2) Build sqlite:/// URL from DB_PATH (accepts a full sqlite URL too)
        """
        if self.database_url:
            return self.database_url

        path = (self.db_path or "").strip() or "./data/parish.sqlite"
        if path.startswith("sqlite:"):
            return path

        p = Path(path)
        # Path() drops a leading "./", so relative paths are re-anchored to cwd
        if not p.is_absolute():
            return f"sqlite:///./{p.as_posix()}"

        # Absolute path needs 4 slashes after scheme (sqlite:////abs/path)
        return f"sqlite:////{p.as_posix().lstrip('/')}"


settings = Settings()
