"""Async database access for the catalog.

One engine per process; catalog services receive the session factory and
open a short-lived session per operation.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.infrastructure.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base shared by all catalog models."""


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency returning the application's session factory.

    Tests override it to point the API at another database.
    """
    return async_session_factory
