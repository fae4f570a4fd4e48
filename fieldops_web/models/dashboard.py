"""Pydantic models for the ops dashboard and calendar."""

from datetime import date, time
from typing import Optional
from pydantic import BaseModel, Field

from .job import JobResponse
from .ops import OpsStatus


class OpsBucketCount(BaseModel):
    """Number of jobs in one ops status."""

    status: OpsStatus
    label: str
    count: int


class OpsSummary(BaseModel):
    """Ops dashboard tab counts."""

    buckets: list[OpsBucketCount] = Field(default_factory=list)
    total: int = 0


class OpsBucket(BaseModel):
    """Jobs in one ops status."""

    status: OpsStatus
    jobs: list[JobResponse] = Field(default_factory=list)


class CalendarEvent(BaseModel):
    """A scheduled job as shown on the calendar."""

    id: str
    title: str
    start_date: date
    job_id: str
    ops_status: OpsStatus
    contractor_name: Optional[str] = None
    permit_number: Optional[str] = None
    window_start: Optional[time] = None
    window_end: Optional[time] = None


class CalendarResponse(BaseModel):
    """Calendar events for a month grid."""

    range_start: date
    range_end: date
    events: list[CalendarEvent] = Field(default_factory=list)
