"""FastAPI application entry point for Field Ops Web."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .dependencies import init_db
from .errors import NotFoundError
from .api import (
    health_router,
    jobs_router,
    tests_router,
    equipment_router,
    visits_router,
    ops_router,
    calendar_router,
    contractors_router,
    customers_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings.ensure_directories()
    await init_db()
    logger.info(f"Field Ops Web started (database: {settings.database_path})")
    yield
    # Shutdown (cleanup if needed)


app = FastAPI(
    title="Field Ops Web",
    description="ECC compliance testing and job lifecycle service",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def domain_error_handler(request: Request, exc: ValueError):
    """Domain-rule violations raised by the services."""
    logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# API routes
app.include_router(health_router, prefix=settings.api_v1_prefix)
app.include_router(jobs_router, prefix=settings.api_v1_prefix)
app.include_router(tests_router, prefix=settings.api_v1_prefix)
app.include_router(equipment_router, prefix=settings.api_v1_prefix)
app.include_router(visits_router, prefix=settings.api_v1_prefix)
app.include_router(ops_router, prefix=settings.api_v1_prefix)
app.include_router(calendar_router, prefix=settings.api_v1_prefix)
app.include_router(contractors_router, prefix=settings.api_v1_prefix)
app.include_router(customers_router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    return {"message": "Field Ops Web API", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
