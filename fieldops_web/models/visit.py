"""Pydantic models for job visits."""

from datetime import date, datetime, time
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class VisitStatus(str, Enum):
    """Scheduling state of a visit."""

    NEED_TO_SCHEDULE = "need_to_schedule"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"


class VisitOutcome(str, Enum):
    """Outcome recorded when a visit is closed."""

    PASS = "pass"
    FAIL = "fail"


class VisitSchedule(BaseModel):
    """Request model for scheduling a visit."""

    scheduled_date: date
    window_start: Optional[time] = None
    window_end: Optional[time] = None
    notes: Optional[str] = None


class VisitClose(BaseModel):
    """Request model for closing a visit."""

    outcome: VisitOutcome
    notes: Optional[str] = None


class VisitResponse(BaseModel):
    """Response model for a visit."""

    id: str
    job_id: str
    visit_number: int
    status: VisitStatus
    scheduled_date: Optional[date] = None
    window_start: Optional[time] = None
    window_end: Optional[time] = None
    notes: Optional[str] = None
    outcome: Optional[VisitOutcome] = None
    needs_another_visit: bool = False
    closed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
