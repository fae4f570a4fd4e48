"""Ops dashboard: status tabs and per-status job lists."""

from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.dashboard import OpsBucket, OpsBucketCount, OpsSummary
from ..models.job import JobResponse
from ..models.ops import OpsStatus
from ..schemas.job import Job

SEARCH_COLUMNS = (
    Job.title,
    Job.customer_first_name,
    Job.customer_last_name,
    Job.customer_phone,
    Job.job_address,
    Job.city,
)


def _filters(contractor_id: Optional[str], q: Optional[str]) -> list:
    filters = []
    if contractor_id:
        filters.append(Job.contractor_id == contractor_id)
    q = (q or "").strip()
    if q:
        pattern = f"%{q}%"
        filters.append(or_(*[column.ilike(pattern) for column in SEARCH_COLUMNS]))
    return filters


class OpsDashboardService:
    """Service for the ops triage dashboard."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def summary(
        self,
        contractor_id: Optional[str] = None,
        q: Optional[str] = None,
    ) -> OpsSummary:
        """Job count for every ops status, including empty ones."""
        result = await self.db.execute(
            select(Job.ops_status, func.count(Job.id))
            .where(*_filters(contractor_id, q))
            .group_by(Job.ops_status)
        )
        counts = {status: count for status, count in result.all()}

        buckets = [
            OpsBucketCount(status=status, label=status.label, count=counts.get(status, 0))
            for status in OpsStatus
        ]
        return OpsSummary(buckets=buckets, total=sum(b.count for b in buckets))

    async def bucket(
        self,
        status: OpsStatus,
        contractor_id: Optional[str] = None,
        q: Optional[str] = None,
        limit: int = 200,
    ) -> OpsBucket:
        result = await self.db.execute(
            select(Job)
            .where(Job.ops_status == status, *_filters(contractor_id, q))
            .order_by(Job.follow_up_date.is_(None), Job.follow_up_date, Job.created_at.desc())
            .limit(limit)
        )
        return OpsBucket(
            status=status,
            jobs=[JobResponse.model_validate(job) for job in result.scalars().all()],
        )
