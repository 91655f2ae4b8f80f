import json
import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from datetime import datetime, date
from typing import AsyncGenerator
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from psycopg.types.json import set_json_dumps

from app.config import settings


logger = logging.getLogger(__name__)


class HRJSONEncoder(json.JSONEncoder):
    """Encodes money, dates and ids found in JSON columns (payroll stats, breakdowns)."""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, UUID):
            return str(obj)
        return super().default(obj)


def json_dumps(obj) -> str:
    return json.dumps(obj, cls=HRJSONEncoder)


# psycopg serializes JSON parameters itself; SQLite goes through json_serializer below
set_json_dumps(json_dumps)


def normalize_database_url(url: str) -> str:
    """Route PostgreSQL URLs through the async psycopg driver."""
    for prefix in ("postgresql+asyncpg://", "postgresql://", "postgres://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def create_engine_from_settings() -> AsyncEngine:
    url = normalize_database_url(settings.DATABASE_URL)

    if url.startswith("sqlite"):
        # No pool tuning for SQLite (tests and local runs)
        return create_async_engine(
            url,
            echo=settings.DEBUG,
            json_serializer=json_dumps,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        url,
        echo=settings.DEBUG,
        json_serializer=json_dumps,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        connect_args={
            "prepare_threshold": None,  # Supabase transaction pooler rejects prepared statements
            "connect_timeout": 30,
        },
    )


engine = create_engine_from_settings()

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Declarative base for all HRMS models."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    Committed when the endpoint returns, rolled back when it raises
    (including HTTPException).
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_db_session():
    """Session for scheduled jobs, committed on clean exit."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables. Schema changes go through alembic/versions."""
    from app import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database ready ({len(Base.metadata.tables)} tables)")
