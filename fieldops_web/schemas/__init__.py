# SQLAlchemy ORM models
from .job import Base, Job, JobEvent
from .contractor import Contractor
from .customer import Customer, Location
from .system import JobSystem, JobEquipment
from .visit import JobVisit
from .test_run import EccTestRun

__all__ = [
    "Base",
    "Job",
    "JobEvent",
    "Contractor",
    "Customer",
    "Location",
    "JobSystem",
    "JobEquipment",
    "JobVisit",
    "EccTestRun",
]
