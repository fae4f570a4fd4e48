"""Job visits: numbering, scheduling and close-out."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.ops import OpsStatus
from ..models.visit import VisitClose, VisitOutcome, VisitResponse, VisitSchedule, VisitStatus
from ..schemas.job import Job
from ..schemas.visit import JobVisit
from .ops_status import OpsStatusService
from .retest_service import RetestService
from .scheduling import validate_window
from .timeline import add_event

logger = logging.getLogger(__name__)


class VisitService:
    """Service for job visits."""

    def __init__(self, db: AsyncSession, actor_id: Optional[str] = None):
        self.db = db
        self.actor_id = actor_id
        self.ops = OpsStatusService(db, actor_id=actor_id)

    async def _get_job(self, job_id: str) -> Job:
        if not job_id:
            raise ValueError("Job ID is required")
        job = await self.db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job", job_id)
        return job

    async def _get_visit(self, job_id: str, visit_id: str) -> JobVisit:
        if not visit_id:
            raise ValueError("Visit ID is required")
        visit = await self.db.get(JobVisit, visit_id)
        if visit is None or visit.job_id != job_id:
            raise NotFoundError("Visit", visit_id)
        return visit

    async def _next_visit_number(self, job_id: str) -> int:
        current = await self.db.scalar(
            select(func.max(JobVisit.visit_number)).where(JobVisit.job_id == job_id)
        )
        return (current or 0) + 1

    async def _latest_visit(self, job_id: str) -> Optional[JobVisit]:
        result = await self.db.execute(
            select(JobVisit)
            .where(JobVisit.job_id == job_id)
            .order_by(JobVisit.visit_number.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def _insert_visit(self, job: Job, status: VisitStatus, **fields) -> JobVisit:
        visit = JobVisit(
            job_id=job.id,
            visit_number=await self._next_visit_number(job.id),
            status=status,
            **fields,
        )
        self.db.add(visit)
        await self.db.flush()
        return visit

    async def ensure_visit(self, job_id: str) -> JobVisit:
        """Latest visit for the job, creating visit #1 when there is none."""
        job = await self._get_job(job_id)
        visit = await self._latest_visit(job_id)
        if visit is not None:
            return visit

        if job.scheduled_date is not None:
            return await self._insert_visit(
                job,
                VisitStatus.SCHEDULED,
                scheduled_date=job.scheduled_date,
                window_start=job.window_start,
                window_end=job.window_end,
            )
        return await self._insert_visit(job, VisitStatus.NEED_TO_SCHEDULE)

    async def list_visits(self, job_id: str) -> list[VisitResponse]:
        result = await self.db.execute(
            select(JobVisit).where(JobVisit.job_id == job_id).order_by(JobVisit.visit_number)
        )
        return [VisitResponse.model_validate(v) for v in result.scalars().all()]

    async def create_next_visit(self, job_id: str) -> VisitResponse:
        """Open another visit that still needs scheduling; the job awaits a retest."""
        job = await self._get_job(job_id)
        visit = await self._insert_visit(job, VisitStatus.NEED_TO_SCHEDULE)

        job.follow_up_date = None
        job.pending_info_reason = None
        await self.db.flush()
        await self.ops.force_set(job_id, OpsStatus.RETEST_NEEDED, "next_visit_created")

        await add_event(
            self.db,
            job_id,
            "visit_created",
            message=f"Visit #{visit.visit_number} created",
            meta={"visit_id": visit.id, "visit_number": visit.visit_number},
            user_id=self.actor_id,
        )
        return VisitResponse.model_validate(visit)

    async def schedule_visit(
        self,
        job_id: str,
        visit_id: str,
        schedule: VisitSchedule,
    ) -> VisitResponse:
        """Schedule an existing visit and sync the job's appointment."""
        validate_window(schedule.window_start, schedule.window_end)
        job = await self._get_job(job_id)
        visit = await self._get_visit(job_id, visit_id)

        visit.status = VisitStatus.SCHEDULED
        visit.scheduled_date = schedule.scheduled_date
        visit.window_start = schedule.window_start
        visit.window_end = schedule.window_end
        visit.notes = schedule.notes or None

        self._sync_job_appointment(job, schedule)
        job.pending_info_reason = None
        await self.db.flush()
        await self.ops.force_set(job_id, OpsStatus.SCHEDULED, "visit_scheduled")

        await add_event(
            self.db,
            job_id,
            "visit_scheduled",
            message=f"Visit #{visit.visit_number} scheduled for {schedule.scheduled_date.isoformat()}",
            meta={"visit_id": visit.id, "scheduled_date": schedule.scheduled_date.isoformat()},
            user_id=self.actor_id,
        )
        return VisitResponse.model_validate(visit)

    async def schedule_retest_visit(self, job_id: str, schedule: VisitSchedule) -> VisitResponse:
        """Create the next visit already scheduled."""
        validate_window(schedule.window_start, schedule.window_end)
        job = await self._get_job(job_id)
        visit = await self._insert_visit(
            job,
            VisitStatus.SCHEDULED,
            scheduled_date=schedule.scheduled_date,
            window_start=schedule.window_start,
            window_end=schedule.window_end,
            notes=schedule.notes or None,
            needs_another_visit=False,
        )

        self._sync_job_appointment(job, schedule)
        await self.db.flush()
        await self.ops.force_set(job_id, OpsStatus.SCHEDULED, "retest_visit_scheduled")

        await add_event(
            self.db,
            job_id,
            "visit_scheduled",
            message=f"Retest visit #{visit.visit_number} scheduled for {schedule.scheduled_date.isoformat()}",
            meta={"visit_id": visit.id, "scheduled_date": schedule.scheduled_date.isoformat()},
            user_id=self.actor_id,
        )
        return VisitResponse.model_validate(visit)

    async def close_visit(self, job_id: str, visit_id: str, close: VisitClose) -> VisitResponse:
        """Record a visit's outcome; a failed visit needs another one."""
        job = await self._get_job(job_id)
        visit = await self._get_visit(job_id, visit_id)
        before = job.ops_status

        failed = close.outcome == VisitOutcome.FAIL
        visit.status = VisitStatus.COMPLETED
        visit.outcome = close.outcome
        visit.needs_another_visit = failed
        visit.closed_at = datetime.utcnow()
        visit.notes = close.notes or None
        await self.db.flush()

        next_status = OpsStatus.FAILED if failed else OpsStatus.PAPERWORK_REQUIRED
        await self.ops.force_set(job_id, next_status, "visit_closed")
        await RetestService(self.db, actor_id=self.actor_id).handle_completion(
            job_id, before, job.ops_status
        )

        await add_event(
            self.db,
            job_id,
            "visit_closed",
            message=f"Visit #{visit.visit_number} closed ({close.outcome.value})",
            meta={"visit_id": visit.id, "outcome": close.outcome.value},
            user_id=self.actor_id,
        )
        return VisitResponse.model_validate(visit)

    @staticmethod
    def _sync_job_appointment(job: Job, schedule: VisitSchedule) -> None:
        job.scheduled_date = schedule.scheduled_date
        job.window_start = schedule.window_start
        job.window_end = schedule.window_end
