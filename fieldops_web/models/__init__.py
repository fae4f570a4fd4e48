# Pydantic models
from .ops import JobType, OpsStatus, ProjectType, is_manual_lock
from .job import JobIntake, JobResponse
from .test_run import ComplianceResult, TestType, Verdict

__all__ = [
    "JobType",
    "OpsStatus",
    "ProjectType",
    "is_manual_lock",
    "JobIntake",
    "JobResponse",
    "ComplianceResult",
    "TestType",
    "Verdict",
]
