"""Async SQLAlchemy engine/session setup."""

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def build_engine(url: str):
    """
    Create an async engine for *url*.

    In-memory SQLite gets a single shared connection, otherwise every
    pooled connection would see its own empty database.
    """
    if url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url):
        return create_async_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(url)


def build_session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_db(engine):
    """Create all tables on *engine*."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
