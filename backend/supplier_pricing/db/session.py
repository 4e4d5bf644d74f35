"""
Async SQLAlchemy session factory.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from supplier_pricing.core.config import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    pool_size=20,
    max_overflow=10,
    pool_pre_ping=True,
)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def make_session_factory(url: str | None = None, **engine_kwargs):
    """Create a fresh engine + session factory.

    Used by Celery workers, which run each task under its own
    `asyncio.run()` loop and must not share the module-level pool.
    Returns (factory, engine); the caller disposes the engine.
    """
    fresh_engine = create_async_engine(url or settings.DATABASE_URL, echo=False, **engine_kwargs)
    factory = async_sessionmaker(fresh_engine, class_=AsyncSession, expire_on_commit=False)
    return factory, fresh_engine


async def get_db() -> AsyncSession:
    """Dependency that yields an async DB session."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
