"""
Database engine and session management.

A single async engine (and connection pool) serves the public registry and
every tenant schema. Tenant routing is attached per session through
``schema_translate_map``, so pooled connections never carry tenant state.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from hms.config import settings
from hms.models.base import TENANT_SCHEMA_PLACEHOLDER


engine: AsyncEngine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


def tenant_engine(schema: str) -> AsyncEngine:
    """
    Get an engine view whose statements target a tenant schema.

    The returned engine shares the pool of the main engine; only the
    execution options differ.

    Args:
        schema: Validated tenant schema name

    Returns:
        Engine with the tenant placeholder translated to ``schema``
    """
    return engine.execution_options(
        schema_translate_map={TENANT_SCHEMA_PLACEHOLDER: schema}
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session on the public schema.

    Commits when the request handler succeeds, rolls back otherwise.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def open_tenant_session(schema: str) -> AsyncIterator[AsyncSession]:
    """
    Open a session routed to a tenant schema.

    Commits when the block exits normally, rolls back when it raises.

    Args:
        schema: Validated tenant schema name
    """
    async with AsyncSession(
        bind=tenant_engine(schema),
        expire_on_commit=False,
        autoflush=False,
    ) as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
