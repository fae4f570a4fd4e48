"""Job visit endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_actor_id, get_db
from ..models.visit import VisitClose, VisitResponse, VisitSchedule
from ..services.visit_service import VisitService

router = APIRouter(prefix="/jobs/{job_id}/visits", tags=["visits"])

DbSession = Annotated[AsyncSession, Depends(get_db)]
ActorId = Annotated[Optional[str], Depends(get_actor_id)]


@router.get("", response_model=list[VisitResponse])
async def list_visits(job_id: str, db: DbSession):
    return await VisitService(db).list_visits(job_id)


@router.post("", response_model=VisitResponse, status_code=201)
async def create_next_visit(job_id: str, db: DbSession, actor_id: ActorId):
    """Open the next visit; the job moves to retest needed."""
    return await VisitService(db, actor_id=actor_id).create_next_visit(job_id)


@router.post("/retest", response_model=VisitResponse, status_code=201)
async def schedule_retest_visit(
    job_id: str,
    schedule: VisitSchedule,
    db: DbSession,
    actor_id: ActorId,
):
    """Create the next visit already scheduled."""
    return await VisitService(db, actor_id=actor_id).schedule_retest_visit(job_id, schedule)


@router.put("/{visit_id}/schedule", response_model=VisitResponse)
async def schedule_visit(
    job_id: str,
    visit_id: str,
    schedule: VisitSchedule,
    db: DbSession,
    actor_id: ActorId,
):
    return await VisitService(db, actor_id=actor_id).schedule_visit(job_id, visit_id, schedule)


@router.post("/{visit_id}/close", response_model=VisitResponse)
async def close_visit(
    job_id: str,
    visit_id: str,
    close: VisitClose,
    db: DbSession,
    actor_id: ActorId,
):
    return await VisitService(db, actor_id=actor_id).close_visit(job_id, visit_id, close)
