"""ECC test run endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_actor_id, get_db
from ..models.test_run import (
    CoreTestsCreate,
    ExemptionRequest,
    OverrideRequest,
    TestRunCreate,
    TestRunResponse,
    TestType,
)
from ..services.test_run_service import TestRunService

router = APIRouter(prefix="/jobs/{job_id}/tests", tags=["tests"])

DbSession = Annotated[AsyncSession, Depends(get_db)]
ActorId = Annotated[Optional[str], Depends(get_actor_id)]


@router.post("", response_model=TestRunResponse, status_code=201)
async def add_run(job_id: str, run: TestRunCreate, db: DbSession, actor_id: ActorId):
    """Add an empty test run."""
    return await TestRunService(db, actor_id=actor_id).add_run(
        job_id,
        run.test_type,
        system_id=run.system_id,
        visit_id=run.visit_id,
    )


@router.post("/core", response_model=list[TestRunResponse], status_code=201)
async def add_core_tests(job_id: str, body: CoreTestsCreate, db: DbSession, actor_id: ActorId):
    """Add the required test set for a system."""
    return await TestRunService(db, actor_id=actor_id).add_core_tests(job_id, body.system_id)


@router.get("", response_model=list[TestRunResponse])
async def list_runs(job_id: str, db: DbSession):
    return await TestRunService(db).list_runs(job_id)


@router.get("/{run_id}", response_model=TestRunResponse)
async def get_run(job_id: str, run_id: str, db: DbSession):
    return await TestRunService(db).get_run(job_id, run_id)


@router.post("/{run_id}/measurements", response_model=TestRunResponse)
async def save_measurements(
    job_id: str,
    run_id: str,
    request: Request,
    db: DbSession,
    actor_id: ActorId,
    test_type: Optional[TestType] = Query(default=None, description="Expected run type"),
):
    """Save readings posted by the test form (raw form fields)."""
    form = await request.form()
    return await TestRunService(db, actor_id=actor_id).save_measurements(
        job_id,
        run_id,
        dict(form),
        expected_type=test_type,
    )


@router.put("/{run_id}/override", response_model=TestRunResponse)
async def set_override(
    job_id: str,
    run_id: str,
    body: OverrideRequest,
    db: DbSession,
    actor_id: ActorId,
):
    return await TestRunService(db, actor_id=actor_id).set_override(
        job_id, run_id, body.override, body.reason
    )


@router.post("/{run_id}/exemption", response_model=TestRunResponse)
async def apply_exemption(
    job_id: str,
    run_id: str,
    body: ExemptionRequest,
    db: DbSession,
    actor_id: ActorId,
):
    return await TestRunService(db, actor_id=actor_id).apply_exemption(
        job_id, run_id, body.kind, body.note
    )


@router.post("/{run_id}/complete", response_model=TestRunResponse)
async def complete_run(job_id: str, run_id: str, db: DbSession, actor_id: ActorId):
    """Mark the run completed and re-evaluate the job."""
    return await TestRunService(db, actor_id=actor_id).complete_run(job_id, run_id)


@router.delete("/{run_id}", status_code=204)
async def delete_run(job_id: str, run_id: str, db: DbSession, actor_id: ActorId):
    await TestRunService(db, actor_id=actor_id).delete_run(job_id, run_id)
