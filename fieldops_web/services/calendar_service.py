"""Month-grid calendar of scheduled jobs."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..models.dashboard import CalendarEvent, CalendarResponse
from ..schemas.contractor import Contractor
from ..schemas.job import Job
from .scheduling import month_grid_range


class CalendarService:
    """Service for calendar views."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_events(
        self,
        year: int,
        month: int,
        contractor_id: Optional[str] = None,
    ) -> CalendarResponse:
        """
        Scheduled jobs visible on a month grid.

        The grid runs from the Sunday on or before the 1st to the Saturday
        on or after the last day, so leading and trailing days are included.
        Jobs without a contractor show the default contractor label.
        """
        if not 1 <= month <= 12:
            raise ValueError("Month must be between 1 and 12")
        range_start, range_end = month_grid_range(year, month)

        query = (
            select(Job, Contractor.name)
            .outerjoin(Contractor, Job.contractor_id == Contractor.id)
            .where(
                Job.scheduled_date.is_not(None),
                Job.scheduled_date >= range_start,
                Job.scheduled_date <= range_end,
            )
        )
        if contractor_id:
            query = query.where(Job.contractor_id == contractor_id)
        result = await self.db.execute(
            query.order_by(Job.scheduled_date, Job.window_start)
        )

        events = []
        for job, contractor_name in result.all():
            title = f"{job.title} – {job.city}" if job.city else job.title
            events.append(
                CalendarEvent(
                    id=job.id,
                    title=title,
                    start_date=job.scheduled_date,
                    job_id=job.id,
                    ops_status=job.ops_status,
                    contractor_name=contractor_name or settings.default_contractor_name,
                    permit_number=job.permit_number,
                    window_start=job.window_start,
                    window_end=job.window_end,
                )
            )
        return CalendarResponse(range_start=range_start, range_end=range_end, events=events)
