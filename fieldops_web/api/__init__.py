# API routes
from .health import router as health_router
from .jobs import router as jobs_router
from .tests import router as tests_router
from .equipment import router as equipment_router
from .visits import router as visits_router
from .ops import router as ops_router
from .calendar import router as calendar_router
from .contractors import router as contractors_router
from .customers import router as customers_router

__all__ = [
    "health_router",
    "jobs_router",
    "tests_router",
    "equipment_router",
    "visits_router",
    "ops_router",
    "calendar_router",
    "contractors_router",
    "customers_router",
]
