# marketplace_chat/config/settings.py
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Relational store (PostgreSQL in production)
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "marketplace"
    db_user: str = "postgres"
    db_password: str = ""
    db_echo: bool = False

    # full SQLAlchemy URL, wins over the db_* fields (ex: "sqlite://")
    sqlalchemy_url: str | None = None

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    app_prefix: str = ""
    cors_origins_raw: str = "http://localhost:3000,http://127.0.0.1:3000"

    # "database" (sessions table, session_token cookie) | "jwt"
    session_backend: str = "database"
    session_cookie_name: str = "session_token"

    jwt_secret: str = "dev-secret-change-me"
    jwt_issuer: str = "marketplace-api"
    jwt_audience: str = "marketplace-front"
    jwt_access_minutes: int = 60

    socketio_async_mode: str = "eventlet"

    conversation_page_size: int = 20
    conversation_page_max: int = 100
    message_page_size: int = 50
    message_page_max: int = 200
    message_max_length: int = 5000

    # archived conversations are left out of the unread badge unless enabled
    unread_include_archived: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("db_host", "db_name", "db_user", "db_password", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip().strip('"').strip("'")
        return v

    @field_validator("session_backend")
    @classmethod
    def check_session_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("database", "jwt"):
            raise ValueError("session_backend must be 'database' or 'jwt'")
        return v

    @property
    def database_url(self) -> str:
        if self.sqlalchemy_url:
            return self.sqlalchemy_url

        user = quote_plus(self.db_user)
        password = quote_plus(self.db_password)
        return f"postgresql+psycopg2://{user}:{password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_raw.split(",") if o.strip()]

    @property
    def api_prefix(self) -> str:
        return f"{self.app_prefix.rstrip('/')}/api"

