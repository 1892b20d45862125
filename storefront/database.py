# storefront/database.py
import urllib.parse
from typing import AsyncGenerator

import structlog
from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import Settings

logger = structlog.get_logger(__name__)

Base = declarative_base()


def build_engine(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(settings.async_database_url, echo=settings.sql_echo, future=True)

    if engine.dialect.name == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def build_session_maker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_models(engine: AsyncEngine) -> None:
    """Create missing tables. In production use the alembic migrations instead."""
    # models must be imported so their tables are registered on Base.metadata
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.session_maker() as session:
        yield session


def ensure_database_exists(database_url: str) -> bool:
    """
    Create the Postgres database named in database_url if it is missing,
    connecting through the maintenance database (postgres).

    Returns True when the database exists afterwards. Non-Postgres URLs are
    left alone. Uses psycopg2 (psycopg2-binary).
    """
    parsed = urllib.parse.urlparse(database_url)
    if not parsed.scheme.startswith("postgresql"):
        return True
    dbname = parsed.path.lstrip("/") if parsed.path else ""
    if not dbname:
        return False

    import psycopg2
    from psycopg2 import sql

    try:
        conn = psycopg2.connect(
            dbname="postgres",
            user=urllib.parse.unquote(parsed.username or "postgres"),
            password=urllib.parse.unquote(parsed.password or ""),
            host=parsed.hostname or "localhost",
            port=parsed.port or 5432,
        )
    except psycopg2.OperationalError as exc:
        logger.warning("Could not reach maintenance database", error=str(exc))
        return False

    try:
        conn.autocommit = True
        with conn.cursor() as cur:
            cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (dbname,))
            if cur.fetchone() is None:
                cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(dbname)))
                logger.info("Created database", database=dbname)
    finally:
        conn.close()
    return True
