"""Customer contact attempts and follow-up cadence."""

import logging
from datetime import date, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.job import ContactAttemptCreate, JobResponse
from ..models.ops import ActionRequiredBy
from ..schemas.job import Job, JobEvent
from .scheduling import add_days, business_today
from .timeline import add_event

logger = logging.getLogger(__name__)

CONTACT_METHODS = ("call", "text")
QUICK_FOLLOW_UP_ATTEMPTS = 3
ESCALATION_AFTER_DAYS = 7


def follow_up_days(attempt_number: int) -> int:
    """Next business-day offset: daily for the first attempts, then every 3 days."""
    return 1 if attempt_number <= QUICK_FOLLOW_UP_ATTEMPTS else 3


class ContactService:
    """Logs attempts to reach the customer and sets the next follow-up."""

    def __init__(self, db: AsyncSession, actor_id: Optional[str] = None):
        self.db = db
        self.actor_id = actor_id

    async def _attempt_dates(self, job_id: str) -> list[date]:
        result = await self.db.execute(
            select(JobEvent.created_at)
            .where(JobEvent.job_id == job_id, JobEvent.event_type == "customer_attempt")
            .order_by(JobEvent.created_at)
        )
        # Event timestamps are stored as naive UTC
        return [business_today(ts.replace(tzinfo=timezone.utc)) for ts in result.scalars().all()]

    async def log_contact_attempt(
        self,
        job_id: str,
        attempt: ContactAttemptCreate,
        today: Optional[date] = None,
    ) -> JobResponse:
        method = (attempt.method or "").strip().lower()
        if method not in CONTACT_METHODS:
            raise ValueError("Contact method must be call or text")
        result = (attempt.result or "").strip() or "no_answer"

        job = await self.db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job", job_id)

        today = today or business_today()
        previous = await self._attempt_dates(job_id)
        attempt_number = len(previous) + 1
        first_attempt = previous[0] if previous else today

        await add_event(
            self.db,
            job_id,
            "customer_attempt",
            message=f"Customer contact attempt #{attempt_number} ({method}): {result}",
            meta={"method": method, "result": result, "attempt_number": attempt_number},
            user_id=self.actor_id,
        )

        job.follow_up_date = add_days(today, follow_up_days(attempt_number))
        job.action_required_by = ActionRequiredBy.CUSTOMER
        await self.db.flush()

        if today >= add_days(first_attempt, ESCALATION_AFTER_DAYS):
            await add_event(
                self.db,
                job_id,
                "customer_escalation_suggested",
                message="No customer response for a week; consider escalating",
                meta={
                    "attempt_number": attempt_number,
                    "first_attempt_date": first_attempt.isoformat(),
                },
                user_id=self.actor_id,
            )
            logger.info(f"Job {job_id}: escalation suggested after {attempt_number} attempts")

        return JobResponse.model_validate(job)
