"""
Database connection (SQLAlchemy asyncio)

Centralises engine creation, the session factory and the declarative base.
One AsyncSession is opened per request and wrapped by a UnitOfWork.

Usage:
    @router.get("/items")
    async def read_items(uow: UnitOfWork = Depends(get_unit_of_work)):
        ...
"""
import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from .config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base for ORM models"""


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an AsyncEngine for the given URL

    In-memory SQLite needs a single shared connection, otherwise every
    checkout would see an empty database.
    """
    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update({
            "pool_pre_ping": True,  # Verify connection before use
            "pool_size": 10,
            "max_overflow": 20,
        })
    return create_async_engine(database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory shared by the application

    autoflush is off so staged work stays pending until the unit of work
    saves it; expire_on_commit is off so entities stay readable after commit.
    """
    return async_sessionmaker(engine, autoflush=False, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
SessionLocal = build_session_factory(engine)


async def init_models(target: AsyncEngine = engine) -> None:
    """Create all tables that do not exist yet"""
    # Importing the models registers them on Base.metadata
    from bakery import models  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")

