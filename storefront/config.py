# storefront/config.py
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Runtime settings. Defaults are meant for local development only."""

    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "storefront_db"
    # full URL wins over the parts above (tests point it at sqlite+aiosqlite)
    database_url: Optional[str] = None
    sql_echo: bool = False

    jwt_secret: str = "supersecretkey"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 10

    log_level: str = "INFO"
    log_json: bool = False
    cors_origins: tuple = field(default=("*",))

    @property
    def async_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        url = URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)

    @property
    def sync_database_url(self) -> str:
        # alembic and the bootstrap helper need a sync driver
        return self.async_database_url.replace("+asyncpg", "").replace("+aiosqlite", "")

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            db_host=os.getenv("DB_HOST", "localhost"),
            db_port=int(os.getenv("DB_PORT", "5432")),
            db_user=os.getenv("DB_USER", "postgres"),
            db_password=os.getenv("DB_PASSWORD", "postgres"),
            db_name=os.getenv("DB_NAME", "storefront_db"),
            database_url=os.getenv("DATABASE_URL") or None,
            sql_echo=_env_bool("SQL_ECHO"),
            jwt_secret=os.getenv("JWT_SECRET", "supersecretkey"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=_env_bool("LOG_JSON"),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )
