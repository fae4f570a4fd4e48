"""Calendar endpoint."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db
from ..models.dashboard import CalendarResponse
from ..services.calendar_service import CalendarService
from ..services.scheduling import business_today

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("", response_model=CalendarResponse)
async def get_calendar(
    db: Annotated[AsyncSession, Depends(get_db)],
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    contractor_id: Optional[str] = Query(default=None),
):
    """Scheduled jobs on a month grid; defaults to the current business month."""
    today = business_today()
    return await CalendarService(db).get_events(
        year or today.year,
        month or today.month,
        contractor_id=contractor_id,
    )
