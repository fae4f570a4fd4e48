"""Contractor endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db
from ..models.contractor import ContractorCreate, ContractorResponse, ContractorUpdate
from ..services.contractor_service import ContractorService

router = APIRouter(prefix="/contractors", tags=["contractors"])

DbSession = Annotated[AsyncSession, Depends(get_db)]


@router.get("", response_model=list[ContractorResponse])
async def list_contractors(db: DbSession):
    return await ContractorService(db).list_contractors()


@router.post("", response_model=ContractorResponse, status_code=201)
async def create_contractor(contractor: ContractorCreate, db: DbSession):
    """Add a contractor; billing name defaults to the contractor name."""
    return await ContractorService(db).create_contractor(contractor)


@router.get("/{contractor_id}", response_model=ContractorResponse)
async def get_contractor(contractor_id: str, db: DbSession):
    contractor = await ContractorService(db).get_contractor(contractor_id)
    if not contractor:
        raise HTTPException(status_code=404, detail="Contractor not found")
    return contractor


@router.patch("/{contractor_id}", response_model=ContractorResponse)
async def update_contractor(contractor_id: str, update: ContractorUpdate, db: DbSession):
    return await ContractorService(db).update_contractor(contractor_id, update)
