"""SQLAlchemy ORM models for jobs and their timeline."""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Date, DateTime, Time, Text, Enum, ForeignKey, JSON, Index
from sqlalchemy.orm import declarative_base

from ..models.ops import ActionRequiredBy, JobType, OpsStatus, ProjectType

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


class Job(Base):
    """Job database model."""

    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    job_type = Column(Enum(JobType), default=JobType.ECC, nullable=False)
    project_type = Column(Enum(ProjectType), default=ProjectType.ALTERATION, nullable=False)
    ops_status = Column(
        Enum(OpsStatus),
        default=OpsStatus.NEED_TO_SCHEDULE,
        nullable=False,
    )
    parent_job_id = Column(String(36), ForeignKey("jobs.id"), nullable=True)

    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=True)
    location_id = Column(String(36), ForeignKey("locations.id"), nullable=True)
    contractor_id = Column(String(36), ForeignKey("contractors.id"), nullable=True)

    # Customer snapshot kept on the job for lists and calendars
    customer_first_name = Column(String(120), nullable=True)
    customer_last_name = Column(String(120), nullable=True)
    customer_phone = Column(String(40), nullable=True)
    customer_email = Column(String(255), nullable=True)
    city = Column(String(120), nullable=True)
    job_address = Column(String(255), nullable=True)
    permit_number = Column(String(120), nullable=True)
    job_notes = Column(Text, nullable=True)

    scheduled_date = Column(Date, nullable=True)
    window_start = Column(Time, nullable=True)
    window_end = Column(Time, nullable=True)

    pending_info_reason = Column(Text, nullable=True)
    follow_up_date = Column(Date, nullable=True)
    next_action_note = Column(Text, nullable=True)
    action_required_by = Column(Enum(ActionRequiredBy), nullable=True)

    # Billing snapshot
    billing_name = Column(String(255), nullable=True)
    billing_email = Column(String(255), nullable=True)
    billing_phone = Column(String(40), nullable=True)
    billing_address = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_jobs_ops_status", "ops_status"),
        Index("ix_jobs_parent_job_id", "parent_job_id"),
    )

    def __repr__(self):
        return f"<Job(id={self.id}, title={self.title}, ops_status={self.ops_status})>"


class JobEvent(Base):
    """Append-only timeline entry for a job."""

    __tablename__ = "job_events"

    id = Column(String(36), primary_key=True, default=new_id)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=True)
    event_type = Column(String(64), nullable=False)
    message = Column(Text, nullable=True)
    meta = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<JobEvent(job_id={self.job_id}, event_type={self.event_type})>"
