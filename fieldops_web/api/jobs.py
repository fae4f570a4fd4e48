"""Job intake, edit and ops action endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_actor_id, get_db
from ..models.job import (
    ContactAttemptCreate,
    CustomerUpdate,
    JobEventResponse,
    JobIntake,
    JobListResponse,
    JobResponse,
    NotesUpdate,
    OpsDetailsUpdate,
    OpsStatusUpdate,
    RetestCreate,
    ScheduleUpdate,
)
from ..models.ops import JobType, OpsStatus
from ..services.aggregator import JobVerdict
from ..services.contact_service import ContactService
from ..services.job_service import JobService
from ..services.retest_service import RetestService
from ..services.test_run_service import TestRunService
from ..services.timeline import TimelineService

router = APIRouter(prefix="/jobs", tags=["jobs"])

DbSession = Annotated[AsyncSession, Depends(get_db)]
ActorId = Annotated[Optional[str], Depends(get_actor_id)]


class EvaluationResponse(BaseModel):
    """Result of an on-demand ECC re-evaluation."""

    job_id: str
    verdict: Optional[JobVerdict] = None
    ops_status: OpsStatus


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(intake: JobIntake, db: DbSession, actor_id: ActorId):
    """Create a job from the intake form."""
    job_service = JobService(db, actor_id=actor_id)
    return await job_service.create_from_intake(intake)


@router.get("", response_model=JobListResponse)
async def list_jobs(
    db: DbSession,
    page: int = Query(default=1, ge=1, description="Page number"),
    page_size: int = Query(default=10, ge=1, le=100, description="Items per page"),
    ops_status: Optional[OpsStatus] = Query(default=None),
    job_type: Optional[JobType] = Query(default=None),
):
    """List jobs with pagination."""
    job_service = JobService(db)
    return await job_service.list_jobs(
        page=page,
        page_size=page_size,
        ops_status=ops_status,
        job_type=job_type,
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str, db: DbSession):
    """Get job details."""
    job_service = JobService(db)
    job = await job_service.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.put("/{job_id}/schedule", response_model=JobResponse)
async def update_schedule(job_id: str, update: ScheduleUpdate, db: DbSession, actor_id: ActorId):
    return await JobService(db, actor_id=actor_id).update_schedule(job_id, update)


@router.put("/{job_id}/ops-status", response_model=JobResponse)
async def update_ops_status(
    job_id: str,
    update: OpsStatusUpdate,
    db: DbSession,
    actor_id: ActorId,
):
    """Manual ops status edit (overrides locks)."""
    return await JobService(db, actor_id=actor_id).update_ops_status(job_id, update.ops_status)


@router.put("/{job_id}/ops-details", response_model=JobResponse)
async def update_ops_details(
    job_id: str,
    update: OpsDetailsUpdate,
    db: DbSession,
    actor_id: ActorId,
):
    return await JobService(db, actor_id=actor_id).update_ops_details(job_id, update)


@router.put("/{job_id}/customer", response_model=JobResponse)
async def update_customer(job_id: str, update: CustomerUpdate, db: DbSession, actor_id: ActorId):
    return await JobService(db, actor_id=actor_id).update_customer(job_id, update)


@router.put("/{job_id}/notes", response_model=JobResponse)
async def update_notes(job_id: str, update: NotesUpdate, db: DbSession, actor_id: ActorId):
    return await JobService(db, actor_id=actor_id).update_notes(job_id, update)


@router.post("/{job_id}/contact-attempts", response_model=JobResponse)
async def log_contact_attempt(
    job_id: str,
    attempt: ContactAttemptCreate,
    db: DbSession,
    actor_id: ActorId,
):
    """Log a call or text to the customer and set the next follow-up."""
    return await ContactService(db, actor_id=actor_id).log_contact_attempt(job_id, attempt)


@router.post("/{job_id}/service-complete", response_model=JobResponse)
async def mark_service_complete(job_id: str, db: DbSession, actor_id: ActorId):
    return await JobService(db, actor_id=actor_id).mark_service_complete(job_id)


@router.post("/{job_id}/invoice-sent", response_model=JobResponse)
async def mark_invoice_sent(job_id: str, db: DbSession, actor_id: ActorId):
    return await JobService(db, actor_id=actor_id).mark_invoice_sent(job_id)


@router.post("/{job_id}/paperwork-complete", response_model=JobResponse)
async def mark_paperwork_complete(job_id: str, db: DbSession, actor_id: ActorId):
    return await JobService(db, actor_id=actor_id).mark_paperwork_complete(job_id)


@router.post("/{job_id}/evaluate", response_model=EvaluationResponse)
async def evaluate_job(job_id: str, db: DbSession, actor_id: ActorId):
    """Re-run the ECC evaluation for a job."""
    verdict = await TestRunService(db, actor_id=actor_id).reevaluate(job_id, "manual_evaluation")
    job = await JobService(db).get_job(job_id)
    return EvaluationResponse(job_id=job_id, verdict=verdict, ops_status=job.ops_status)


@router.get("/{job_id}/events", response_model=list[JobEventResponse])
async def list_events(
    job_id: str,
    db: DbSession,
    event_type: Optional[str] = Query(default=None),
):
    """Job timeline, newest first."""
    return await TimelineService(db).list_events(job_id, event_type=event_type)


@router.post("/{job_id}/retests", response_model=JobResponse, status_code=201)
async def create_retest(
    job_id: str,
    db: DbSession,
    actor_id: ActorId,
    retest: Optional[RetestCreate] = None,
):
    """Spawn a retest child job."""
    retest = retest or RetestCreate()
    return await RetestService(db, actor_id=actor_id).create_retest(
        job_id, copy_equipment=retest.copy_equipment
    )


@router.get("/{job_id}/retests", response_model=list[JobResponse])
async def list_retests(job_id: str, db: DbSession):
    return await RetestService(db).list_retests(job_id)
