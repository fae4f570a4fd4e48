"""Job timeline (append-only event log)."""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.job import JobEventResponse
from ..schemas.job import JobEvent


async def add_event(
    db: AsyncSession,
    job_id: str,
    event_type: str,
    message: Optional[str] = None,
    meta: Optional[dict[str, Any]] = None,
    user_id: Optional[str] = None,
) -> JobEvent:
    """Insert a timeline entry. Events are never updated or deleted."""
    event = JobEvent(
        job_id=job_id,
        user_id=user_id,
        event_type=event_type,
        message=message,
        meta=meta or {},
    )
    db.add(event)
    await db.flush()
    return event


class TimelineService:
    """Read access to job timelines."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_events(
        self,
        job_id: str,
        event_type: Optional[str] = None,
    ) -> list[JobEventResponse]:
        """Timeline for a job, newest first."""
        query = select(JobEvent).where(JobEvent.job_id == job_id)
        if event_type is not None:
            query = query.where(JobEvent.event_type == event_type)
        result = await self.db.execute(query.order_by(JobEvent.created_at.desc()))
        return [JobEventResponse.model_validate(e) for e in result.scalars().all()]
