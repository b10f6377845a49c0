from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .models import Base


def build_engine(url: str) -> AsyncEngine:
    return create_async_engine(url, echo=False, future=True)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Canonical async session factory."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    # Single place where DB tables are created in dev. Idempotent.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
