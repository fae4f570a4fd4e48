# Services
from .job_service import JobService
from .test_run_service import TestRunService
from .equipment_service import EquipmentService
from .visit_service import VisitService
from .retest_service import RetestService
from .ops_status import OpsStatusService
from .contact_service import ContactService
from .calendar_service import CalendarService
from .dashboard_service import OpsDashboardService
from .timeline import TimelineService
from .contractor_service import ContractorService
from .customers import CustomerService

__all__ = [
    "JobService",
    "TestRunService",
    "EquipmentService",
    "VisitService",
    "RetestService",
    "OpsStatusService",
    "ContactService",
    "CalendarService",
    "OpsDashboardService",
    "TimelineService",
    "ContractorService",
    "CustomerService",
]
