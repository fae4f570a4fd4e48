"""Request-scoped database session and actor for the field-ops API."""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from .config import settings
from .schemas import Base

logger = logging.getLogger(__name__)

# One engine per process; jobs, events, tests and contractors share the SQLite file
engine = create_async_engine(
    settings.database_url,
    echo=False,
    future=True,
)

# Services keep ORM rows around after commit to build responses
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Create the job, timeline, equipment, visit, test-run and contractor tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database ready at {settings.database_path}")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One unit of work per request.

    A job edit, its ops-status transition and its timeline events are
    committed together when the route returns, or all rolled back when it
    raises.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def get_actor_id(
    x_actor_id: Optional[str] = Header(default=None),
) -> Optional[str]:
    """Acting user id supplied by the upstream auth layer, for audit attribution."""
    if x_actor_id is None:
        return None
    return x_actor_id.strip() or None
