"""Ops dashboard endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db
from ..models.dashboard import OpsBucket, OpsSummary
from ..models.ops import OpsStatus
from ..services.dashboard_service import OpsDashboardService

router = APIRouter(prefix="/ops", tags=["ops"])


@router.get("/summary", response_model=OpsSummary)
async def ops_summary(
    db: Annotated[AsyncSession, Depends(get_db)],
    contractor_id: Optional[str] = Query(default=None),
    q: Optional[str] = Query(default=None, description="Search text"),
):
    """Job counts per ops status."""
    return await OpsDashboardService(db).summary(contractor_id=contractor_id, q=q)


@router.get("/buckets/{status}", response_model=OpsBucket)
async def ops_bucket(
    status: OpsStatus,
    db: Annotated[AsyncSession, Depends(get_db)],
    contractor_id: Optional[str] = Query(default=None),
    q: Optional[str] = Query(default=None, description="Search text"),
):
    return await OpsDashboardService(db).bucket(status, contractor_id=contractor_id, q=q)
