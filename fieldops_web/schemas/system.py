"""SQLAlchemy ORM models for job systems and their equipment."""

from sqlalchemy import Column, String, Float, Text, ForeignKey, UniqueConstraint

from .job import Base, new_id


class JobSystem(Base):
    """A named equipment location (zone) on a job."""

    __tablename__ = "job_systems"

    id = Column(String(36), primary_key=True, default=new_id)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)
    name = Column(String(120), nullable=False)

    __table_args__ = (UniqueConstraint("job_id", "name", name="uq_job_systems_job_name"),)

    def __repr__(self):
        return f"<JobSystem(id={self.id}, name={self.name})>"


class JobEquipment(Base):
    """Equipment installed in a system."""

    __tablename__ = "job_equipment"

    id = Column(String(36), primary_key=True, default=new_id)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)
    system_id = Column(String(36), ForeignKey("job_systems.id"), nullable=False, index=True)
    equipment_role = Column(String(64), nullable=False, default="equipment")
    manufacturer = Column(String(120), nullable=True)
    model = Column(String(120), nullable=True)
    serial = Column(String(120), nullable=True)
    tonnage = Column(Float, nullable=True)
    refrigerant_type = Column(String(40), nullable=True)
    notes = Column(Text, nullable=True)
