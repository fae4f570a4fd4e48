"""Ops-status transitions with manual-lock handling."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.ops import OpsStatus, is_manual_lock
from ..schemas.job import Job
from .timeline import add_event

logger = logging.getLogger(__name__)


class OpsStatusService:
    """Applies ops-status changes and records them on the job timeline."""

    def __init__(self, db: AsyncSession, actor_id: Optional[str] = None):
        self.db = db
        self.actor_id = actor_id

    async def _get_job(self, job_id: str) -> Job:
        job = await self.db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job", job_id)
        return job

    async def current_status(self, job_id: str) -> OpsStatus:
        job = await self._get_job(job_id)
        return job.ops_status

    async def set_if_not_manual(
        self,
        job_id: str,
        next_status: OpsStatus,
        source: str,
    ) -> bool:
        """
        Apply ``next_status`` unless the job holds a manual-lock status.

        Returns:
            True if the status was written, False if the lock won
        """
        job = await self._get_job(job_id)
        if is_manual_lock(job.ops_status):
            logger.debug(
                f"Job {job_id} is locked in {job.ops_status.value}; "
                f"skipping {next_status.value} from {source}"
            )
            return False
        await self._apply(job, next_status, source, forced=False)
        return True

    async def force_set(
        self,
        job_id: str,
        next_status: OpsStatus,
        source: str,
    ) -> bool:
        """Apply ``next_status`` regardless of any manual lock."""
        job = await self._get_job(job_id)
        await self._apply(job, next_status, source, forced=True)
        return True

    async def _apply(
        self,
        job: Job,
        next_status: OpsStatus,
        source: str,
        forced: bool,
    ) -> None:
        previous = job.ops_status
        if previous == next_status:
            return

        job.ops_status = next_status
        await self.db.flush()

        await add_event(
            self.db,
            job.id,
            "ops_status_changed",
            message=f"Ops status changed to {next_status.label}",
            meta={
                "from": previous.value if previous else None,
                "to": next_status.value,
                "source": source,
                "forced": forced,
            },
            user_id=self.actor_id,
        )
        logger.info(
            f"Job {job.id} ops_status {previous.value if previous else None} -> "
            f"{next_status.value} ({source}{', forced' if forced else ''})"
        )
