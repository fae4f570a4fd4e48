"""Job intake, edits and ops-status actions."""

import logging
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.job import (
    CustomerUpdate,
    JobIntake,
    JobListResponse,
    JobResponse,
    NotesUpdate,
    OpsDetailsUpdate,
    ScheduleUpdate,
)
from ..models.ops import JobType, OpsStatus, ProjectType
from ..schemas.contractor import Contractor
from ..schemas.customer import Customer, Location
from ..schemas.job import Job
from .customers import (
    find_or_create_customer,
    is_same_customer_by_name_phone,
    normalize_full_name,
    normalize_phone10,
)
from .equipment_service import EquipmentService
from .ops_status import OpsStatusService
from .scheduling import derive_schedule_and_ops, validate_window
from .timeline import add_event
from .visit_service import VisitService

logger = logging.getLogger(__name__)

OPS_DETAIL_FIELDS = (
    "ops_status",
    "pending_info_reason",
    "follow_up_date",
    "next_action_note",
    "action_required_by",
)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _as_meta(value):
    if value is None:
        return None
    if hasattr(value, "value"):
        return value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


class JobService:
    """Service for job CRUD and ops actions."""

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

    async def create_from_intake(self, intake: JobIntake) -> JobResponse:
        """
        Create customer, location, job, first visit and equipment from intake.

        Raises:
            ValueError: when required intake fields are missing
        """
        first_name = intake.customer_first_name.strip()
        last_name = intake.customer_last_name.strip()
        phone = intake.customer_phone.strip()
        address = intake.address_line1.strip()
        city = intake.city.strip()
        title = _clean(intake.title)

        if not first_name or not last_name or not phone:
            raise ValueError("Missing required fields: First Name, Last Name, Phone.")
        if not address or not city:
            raise ValueError("Missing required fields: Service Address, City.")
        if intake.job_type == JobType.SERVICE and not title:
            raise ValueError("Service jobs require a Job Title.")

        contractor_id = _clean(intake.contractor_id)
        if contractor_id and await self.db.get(Contractor, contractor_id) is None:
            raise ValueError(f"Unknown contractor: {contractor_id}")

        schedule = derive_schedule_and_ops(
            intake.scheduled_date,
            intake.window_start,
            intake.window_end,
        )

        customer_id, reused = await find_or_create_customer(
            self.db,
            first_name,
            last_name,
            phone,
            email=intake.customer_email,
            owner_user_id=self.actor_id,
        )
        name_match = True
        if reused:
            customer = await self.db.get(Customer, customer_id)
            name_match = is_same_customer_by_name_phone(
                normalize_full_name(first_name, last_name),
                normalize_phone10(phone),
                customer,
            )
            if not name_match:
                logger.warning(f"Reused customer {customer_id} by phone with a different name")

        location = Location(
            customer_id=customer_id,
            address_line1=address,
            city=city,
            owner_user_id=self.actor_id,
        )
        self.db.add(location)
        await self.db.flush()

        project_type = intake.project_type
        if intake.job_type == JobType.SERVICE:
            project_type = ProjectType.SERVICE

        job = Job(
            title=title or f"ECC Test - {last_name} ({city})",
            job_type=intake.job_type,
            project_type=project_type,
            ops_status=schedule.ops_status,
            customer_id=customer_id,
            location_id=location.id,
            contractor_id=contractor_id,
            customer_first_name=first_name,
            customer_last_name=last_name,
            customer_phone=phone,
            customer_email=_clean(intake.customer_email),
            city=city,
            job_address=address,
            permit_number=_clean(intake.permit_number),
            job_notes=_clean(intake.job_notes),
            scheduled_date=schedule.scheduled_date,
            window_start=schedule.window_start,
            window_end=schedule.window_end,
            billing_name=_clean(intake.billing_name),
            billing_email=_clean(intake.billing_email),
            billing_phone=_clean(intake.billing_phone),
            billing_address=_clean(intake.billing_address),
        )
        self.db.add(job)
        await self.db.flush()

        await VisitService(self.db, actor_id=self.actor_id).ensure_visit(job.id)
        equipment_count = await EquipmentService(self.db, actor_id=self.actor_id).add_intake_rows(
            job.id, intake.equipment
        )

        await add_event(
            self.db,
            job.id,
            "job_created",
            message="Job created from intake",
            meta={
                "ops_status": job.ops_status.value,
                "customer_id": customer_id,
                "customer_reused": reused,
                "customer_name_match": name_match,
                "equipment": equipment_count,
            },
            user_id=self.actor_id,
        )
        logger.info(f"Created {job.job_type.value} job {job.id} in {job.ops_status.value}")
        return JobResponse.model_validate(job)

    async def get_job(self, job_id: str) -> Optional[JobResponse]:
        """Get a job by ID."""
        job = await self.db.get(Job, job_id)
        if job is None:
            return None
        return JobResponse.model_validate(job)

    async def list_jobs(
        self,
        page: int = 1,
        page_size: int = 10,
        ops_status: Optional[OpsStatus] = None,
        job_type: Optional[JobType] = None,
    ) -> JobListResponse:
        """List jobs with pagination."""
        filters = []
        if ops_status is not None:
            filters.append(Job.ops_status == ops_status)
        if job_type is not None:
            filters.append(Job.job_type == job_type)

        total = await self.db.scalar(select(func.count(Job.id)).where(*filters))

        offset = (page - 1) * page_size
        result = await self.db.execute(
            select(Job)
            .where(*filters)
            .order_by(Job.created_at.desc())
            .offset(offset)
            .limit(page_size)
        )
        jobs = result.scalars().all()

        return JobListResponse(
            jobs=[JobResponse.model_validate(job) for job in jobs],
            total=total or 0,
            page=page,
            page_size=page_size,
        )

    async def update_schedule(self, job_id: str, update: ScheduleUpdate) -> JobResponse:
        """Set the job's appointment; scheduling is an explicit operator action."""
        validate_window(update.window_start, update.window_end)
        job = await self._get_job(job_id)

        job.scheduled_date = update.scheduled_date
        job.window_start = update.window_start
        job.window_end = update.window_end
        job.permit_number = _clean(update.permit_number)
        await self.db.flush()

        await self.ops.force_set(job_id, OpsStatus.SCHEDULED, "schedule_update")
        return JobResponse.model_validate(job)

    async def update_customer(self, job_id: str, update: CustomerUpdate) -> JobResponse:
        """Edit this job's customer snapshot only; profiles are edited via CustomerService."""
        job = await self._get_job(job_id)
        for field, value in update.model_dump(exclude_unset=True).items():
            setattr(job, field, _clean(value))
        await self.db.flush()
        return JobResponse.model_validate(job)

    async def update_notes(self, job_id: str, update: NotesUpdate) -> JobResponse:
        job = await self._get_job(job_id)
        job.job_notes = _clean(update.job_notes)
        await self.db.flush()
        return JobResponse.model_validate(job)

    async def update_ops_status(self, job_id: str, ops_status: OpsStatus) -> JobResponse:
        """Manual ops dropdown edit; overrides any lock."""
        job = await self._get_job(job_id)
        await self.ops.force_set(job_id, ops_status, "manual_edit")
        return JobResponse.model_validate(job)

    async def update_ops_details(self, job_id: str, update: OpsDetailsUpdate) -> JobResponse:
        """
        Save the ops details form. A missing ops_status keeps the current one.
        Nothing is written, and no event recorded, when nothing changed.
        """
        job = await self._get_job(job_id)

        before = {field: getattr(job, field) for field in OPS_DETAIL_FIELDS}
        after = {
            "ops_status": update.ops_status or job.ops_status,
            "pending_info_reason": _clean(update.pending_info_reason),
            "follow_up_date": update.follow_up_date,
            "next_action_note": _clean(update.next_action_note),
            "action_required_by": update.action_required_by,
        }
        changes = [
            {"field": field, "from": _as_meta(before[field]), "to": _as_meta(after[field])}
            for field in OPS_DETAIL_FIELDS
            if before[field] != after[field]
        ]
        if not changes:
            return JobResponse.model_validate(job)

        for field in OPS_DETAIL_FIELDS[1:]:
            setattr(job, field, after[field])
        await self.db.flush()
        if after["ops_status"] != before["ops_status"]:
            await self.ops.force_set(job_id, after["ops_status"], "ops_details")

        await add_event(
            self.db,
            job_id,
            "ops_update",
            message="Ops details updated",
            meta={"changes": changes, "source": "job_detail"},
            user_id=self.actor_id,
        )
        return JobResponse.model_validate(job)

    async def mark_service_complete(self, job_id: str) -> JobResponse:
        """Service job work done: invoice is now required (lock-respecting)."""
        job = await self._get_job(job_id)
        if job.job_type != JobType.SERVICE:
            raise ValueError("Mark complete can only be used for service jobs.")
        await self.ops.set_if_not_manual(job_id, OpsStatus.INVOICE_REQUIRED, "service_complete")
        return JobResponse.model_validate(job)

    async def mark_invoice_sent(self, job_id: str) -> JobResponse:
        """Service job invoiced: close it (lock-respecting)."""
        job = await self._get_job(job_id)
        if job.job_type != JobType.SERVICE:
            raise ValueError("Mark invoice sent can only be used for service jobs.")
        await self.ops.set_if_not_manual(job_id, OpsStatus.CLOSED, "invoice_sent")
        return JobResponse.model_validate(job)

    async def mark_paperwork_complete(self, job_id: str) -> JobResponse:
        """ECC paperwork filed: close the job (explicit operator action)."""
        job = await self._get_job(job_id)
        if job.job_type != JobType.ECC:
            raise ValueError("Paperwork completion is ECC-only.")
        await self.ops.force_set(job_id, OpsStatus.CLOSED, "paperwork_complete")
        return JobResponse.model_validate(job)
