"""Pydantic models for job intake, updates and responses."""

from datetime import date, datetime, time
from typing import Any, Optional
from pydantic import BaseModel, Field

from .equipment import EquipmentRow
from .ops import ActionRequiredBy, JobType, OpsStatus, ProjectType


class JobIntake(BaseModel):
    """Request model for creating a job from the intake form."""

    job_type: JobType = Field(default=JobType.ECC)
    project_type: ProjectType = Field(default=ProjectType.ALTERATION)
    title: Optional[str] = Field(default=None, description="Required for service jobs")
    permit_number: Optional[str] = None

    customer_first_name: str = ""
    customer_last_name: str = ""
    customer_phone: str = ""
    customer_email: Optional[str] = None

    address_line1: str = ""
    city: str = ""

    contractor_id: Optional[str] = None
    job_notes: Optional[str] = None

    scheduled_date: Optional[date] = None
    window_start: Optional[time] = None
    window_end: Optional[time] = None

    billing_name: Optional[str] = None
    billing_email: Optional[str] = None
    billing_phone: Optional[str] = None
    billing_address: Optional[str] = None

    equipment: list[EquipmentRow] = Field(
        default_factory=list,
        description="Equipment rows; systems are created per unique location label",
    )


class JobResponse(BaseModel):
    """Response model for job information."""

    id: str = Field(description="Unique job identifier")
    title: str
    job_type: JobType
    project_type: ProjectType
    ops_status: OpsStatus
    parent_job_id: Optional[str] = None
    customer_id: Optional[str] = None
    location_id: Optional[str] = None
    contractor_id: Optional[str] = None

    customer_first_name: Optional[str] = None
    customer_last_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    city: Optional[str] = None
    job_address: Optional[str] = None
    permit_number: Optional[str] = None
    job_notes: Optional[str] = None

    scheduled_date: Optional[date] = None
    window_start: Optional[time] = None
    window_end: Optional[time] = None

    pending_info_reason: Optional[str] = None
    follow_up_date: Optional[date] = None
    next_action_note: Optional[str] = None
    action_required_by: Optional[ActionRequiredBy] = None

    billing_name: Optional[str] = None
    billing_email: Optional[str] = None
    billing_phone: Optional[str] = None
    billing_address: Optional[str] = None

    created_at: datetime = Field(description="Job creation timestamp")
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobListResponse(BaseModel):
    """Response model for paginated job list."""

    jobs: list[JobResponse] = Field(description="List of jobs")
    total: int = Field(description="Total number of jobs")
    page: int = Field(description="Current page number")
    page_size: int = Field(description="Number of jobs per page")


class ScheduleUpdate(BaseModel):
    """Request model for the job scheduling form."""

    scheduled_date: date
    window_start: Optional[time] = None
    window_end: Optional[time] = None
    permit_number: Optional[str] = None


class OpsStatusUpdate(BaseModel):
    """Request model for a manual ops-status edit."""

    ops_status: OpsStatus


class OpsDetailsUpdate(BaseModel):
    """Request model for the ops details form."""

    ops_status: Optional[OpsStatus] = Field(
        default=None,
        description="Leave empty to keep the current status",
    )
    pending_info_reason: Optional[str] = None
    follow_up_date: Optional[date] = None
    next_action_note: Optional[str] = None
    action_required_by: Optional[ActionRequiredBy] = None


class CustomerUpdate(BaseModel):
    """Request model for editing the job's customer snapshot."""

    customer_first_name: Optional[str] = None
    customer_last_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    job_address: Optional[str] = None
    city: Optional[str] = None


class NotesUpdate(BaseModel):
    """Request model for editing job notes."""

    job_notes: Optional[str] = None


class ContactAttemptCreate(BaseModel):
    """Request model for logging a customer contact attempt."""

    method: str = Field(description="call or text")
    result: Optional[str] = Field(default=None, description="Defaults to no_answer")


class RetestCreate(BaseModel):
    """Request model for spawning a retest job."""

    copy_equipment: bool = Field(
        default=True,
        description="Clone systems and equipment from the parent job",
    )


class JobEventResponse(BaseModel):
    """Response model for a timeline entry."""

    id: str
    job_id: str
    user_id: Optional[str] = None
    event_type: str
    message: Optional[str] = None
    meta: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    class Config:
        from_attributes = True
