"""SQLAlchemy ORM model for job visits."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)

from ..models.visit import VisitOutcome, VisitStatus
from .job import Base, new_id


class JobVisit(Base):
    """Numbered on-site attendance for a job."""

    __tablename__ = "job_visits"

    id = Column(String(36), primary_key=True, default=new_id)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)
    visit_number = Column(Integer, nullable=False)
    status = Column(Enum(VisitStatus), default=VisitStatus.NEED_TO_SCHEDULE, nullable=False)
    scheduled_date = Column(Date, nullable=True)
    window_start = Column(Time, nullable=True)
    window_end = Column(Time, nullable=True)
    notes = Column(Text, nullable=True)
    outcome = Column(Enum(VisitOutcome), nullable=True)
    needs_another_visit = Column(Boolean, default=False, nullable=False)
    closed_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("job_id", "visit_number", name="uq_job_visits_number"),
    )
