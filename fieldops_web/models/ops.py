"""Ops status, job type and project type enumerations."""

from datetime import date
from enum import Enum
from typing import Optional


class JobType(str, Enum):
    """Kind of work a job represents."""

    ECC = "ecc"
    SERVICE = "service"


class ProjectType(str, Enum):
    """Project classification; drives the ECC numeric thresholds."""

    ALTERATION = "alteration"
    ALL_NEW = "all_new"
    NEW_CONSTRUCTION = "new_construction"
    SERVICE = "service"


class OpsStatus(str, Enum):
    """Operational queue a job sits in for staff triage."""

    NEED_TO_SCHEDULE = "need_to_schedule"
    SCHEDULED = "scheduled"
    PENDING_INFO = "pending_info"
    ON_HOLD = "on_hold"
    FAILED = "failed"
    RETEST_NEEDED = "retest_needed"
    PAPERWORK_REQUIRED = "paperwork_required"
    INVOICE_REQUIRED = "invoice_required"
    CLOSED = "closed"

    @property
    def is_manual_lock(self) -> bool:
        return is_manual_lock(self)

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class ActionRequiredBy(str, Enum):
    """Party the next ops action is waiting on."""

    RATER = "rater"
    CONTRACTOR = "contractor"
    CUSTOMER = "customer"


def is_manual_lock(status: Optional[OpsStatus]) -> bool:
    """Whether ``status`` blocks automatic ops-status overwrites."""
    if status is None:
        return False
    return status in (
        OpsStatus.PENDING_INFO,
        OpsStatus.ON_HOLD,
        OpsStatus.RETEST_NEEDED,
        OpsStatus.PAPERWORK_REQUIRED,
        OpsStatus.INVOICE_REQUIRED,
    )


def initial_ops_status(scheduled_date: Optional[date]) -> OpsStatus:
    """Ops status a new job starts in."""
    if scheduled_date is not None:
        return OpsStatus.SCHEDULED
    return OpsStatus.NEED_TO_SCHEDULE
