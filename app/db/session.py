"""
Database session and engine configuration.

The URL comes from settings: asyncpg against PostgreSQL in deployments,
aiosqlite in tests.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # SQL echo in debug mode
    future=True,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Returned records stay readable after commit
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    Services commit their own units of work; anything still pending when the
    endpoint returns is committed here, and an exception rolls it back.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
