"""Job systems and equipment endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_actor_id, get_db
from ..models.equipment import EquipmentCreate, EquipmentResponse, EquipmentUpdate, SystemResponse
from ..services.equipment_service import EquipmentService

router = APIRouter(prefix="/jobs/{job_id}", tags=["equipment"])

DbSession = Annotated[AsyncSession, Depends(get_db)]
ActorId = Annotated[Optional[str], Depends(get_actor_id)]


@router.get("/systems", response_model=list[SystemResponse])
async def list_systems(job_id: str, db: DbSession):
    """Systems with their equipment."""
    return await EquipmentService(db).list_systems(job_id)


@router.post("/equipment", response_model=EquipmentResponse, status_code=201)
async def add_equipment(
    job_id: str,
    equipment: EquipmentCreate,
    db: DbSession,
    actor_id: ActorId,
):
    return await EquipmentService(db, actor_id=actor_id).add_equipment(job_id, equipment)


@router.patch("/equipment/{equipment_id}", response_model=EquipmentResponse)
async def update_equipment(
    job_id: str,
    equipment_id: str,
    update: EquipmentUpdate,
    db: DbSession,
    actor_id: ActorId,
):
    return await EquipmentService(db, actor_id=actor_id).update_equipment(
        job_id, equipment_id, update
    )


@router.delete("/equipment/{equipment_id}", status_code=204)
async def delete_equipment(job_id: str, equipment_id: str, db: DbSession, actor_id: ActorId):
    """Remove equipment; an emptied system is removed too."""
    await EquipmentService(db, actor_id=actor_id).delete_equipment(job_id, equipment_id)
