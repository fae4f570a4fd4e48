"""Retest jobs: creation from a parent job and parent reconciliation."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.job import JobResponse
from ..models.ops import OpsStatus
from ..schemas.job import Job
from ..schemas.system import JobEquipment, JobSystem
from .ops_status import OpsStatusService
from .timeline import add_event

logger = logging.getLogger(__name__)

# Fields copied from the parent so the retest keeps the same
# customer, site and billing context.
SNAPSHOT_FIELDS = (
    "job_type",
    "project_type",
    "customer_id",
    "location_id",
    "contractor_id",
    "customer_first_name",
    "customer_last_name",
    "customer_phone",
    "customer_email",
    "city",
    "job_address",
    "permit_number",
    "billing_name",
    "billing_email",
    "billing_phone",
    "billing_address",
)

RETEST_RESOLVABLE = (OpsStatus.FAILED, OpsStatus.RETEST_NEEDED)


class RetestService:
    """Links retest jobs to the parent they re-attempt."""

    def __init__(self, db: AsyncSession, actor_id: Optional[str] = None):
        self.db = db
        self.actor_id = actor_id

    async def create_retest(
        self,
        parent_id: str,
        copy_equipment: bool = True,
    ) -> JobResponse:
        """
        Create a child retest job for ``parent_id``.

        The child starts in ``need_to_schedule``. With ``copy_equipment`` every
        system and equipment row is cloned onto the child. The whole operation
        runs in a savepoint, so a failure part way leaves no partial retest.
        """
        parent = await self.db.get(Job, parent_id)
        if parent is None:
            raise NotFoundError("Job", parent_id)

        async with self.db.begin_nested():
            child = Job(
                title=f"Retest - {parent.title}",
                ops_status=OpsStatus.NEED_TO_SCHEDULE,
                parent_job_id=parent.id,
                **{field: getattr(parent, field) for field in SNAPSHOT_FIELDS},
            )
            self.db.add(child)
            await self.db.flush()

            cloned_systems = 0
            cloned_equipment = 0
            if copy_equipment:
                cloned_systems, cloned_equipment = await self._clone_equipment(parent.id, child.id)

            await add_event(
                self.db,
                parent.id,
                "retest_created",
                message="Retest job created",
                meta={"child_job_id": child.id, "copied_equipment": copy_equipment},
                user_id=self.actor_id,
            )
            await add_event(
                self.db,
                child.id,
                "retest_linked",
                message="Created as a retest",
                meta={
                    "parent_job_id": parent.id,
                    "systems": cloned_systems,
                    "equipment": cloned_equipment,
                },
                user_id=self.actor_id,
            )

        logger.info(
            f"Created retest {child.id} for job {parent.id} "
            f"({cloned_systems} systems, {cloned_equipment} equipment)"
        )
        return JobResponse.model_validate(child)

    async def _clone_equipment(self, parent_id: str, child_id: str) -> tuple[int, int]:
        result = await self.db.execute(select(JobSystem).where(JobSystem.job_id == parent_id))
        systems = result.scalars().all()

        system_map: dict[str, str] = {}
        for system in systems:
            clone = JobSystem(job_id=child_id, name=system.name)
            self.db.add(clone)
            await self.db.flush()
            system_map[system.id] = clone.id

        result = await self.db.execute(
            select(JobEquipment).where(JobEquipment.job_id == parent_id)
        )
        equipment = result.scalars().all()
        for item in equipment:
            self.db.add(
                JobEquipment(
                    job_id=child_id,
                    system_id=system_map[item.system_id],
                    equipment_role=item.equipment_role,
                    manufacturer=item.manufacturer,
                    model=item.model,
                    serial=item.serial,
                    tonnage=item.tonnage,
                    refrigerant_type=item.refrigerant_type,
                    notes=item.notes,
                )
            )
        await self.db.flush()
        return len(systems), len(equipment)

    async def list_retests(self, parent_id: str) -> list[JobResponse]:
        result = await self.db.execute(
            select(Job).where(Job.parent_job_id == parent_id).order_by(Job.created_at)
        )
        return [JobResponse.model_validate(job) for job in result.scalars().all()]

    async def handle_completion(
        self,
        job_id: str,
        before: OpsStatus,
        after: OpsStatus,
    ) -> None:
        """
        Propagate a retest's result to its parent.

        Fires only when the job just moved into ``paperwork_required`` (pass)
        or ``failed`` (fail) and has a parent. On pass, a parent still in
        ``failed`` or ``retest_needed`` is closed.
        """
        if before == after or after not in (OpsStatus.PAPERWORK_REQUIRED, OpsStatus.FAILED):
            return

        child = await self.db.get(Job, job_id)
        if child is None or not child.parent_job_id:
            return
        parent = await self.db.get(Job, child.parent_job_id)
        if parent is None:
            logger.warning(f"Retest {job_id} points at missing parent {child.parent_job_id}")
            return

        passed = after == OpsStatus.PAPERWORK_REQUIRED
        outcome = "pass" if passed else "fail"

        await add_event(
            self.db,
            parent.id,
            "retest_passed" if passed else "retest_failed",
            message="Retest passed" if passed else "Retest failed",
            meta={"child_job_id": child.id, "outcome": outcome},
            user_id=self.actor_id,
        )
        await add_event(
            self.db,
            child.id,
            "retest_result",
            message=f"Retest result recorded on parent ({outcome})",
            meta={"parent_job_id": parent.id, "outcome": outcome},
            user_id=self.actor_id,
        )

        if passed and parent.ops_status in RETEST_RESOLVABLE:
            ops = OpsStatusService(self.db, actor_id=self.actor_id)
            await ops.force_set(parent.id, OpsStatus.CLOSED, "retest_passed")
            logger.info(f"Closed parent job {parent.id} after retest {child.id} passed")
