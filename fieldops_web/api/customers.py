"""Customer profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db
from ..models.customer import CustomerProfileUpdate, CustomerResponse
from ..services.customers import CustomerService

router = APIRouter(prefix="/customers", tags=["customers"])

DbSession = Annotated[AsyncSession, Depends(get_db)]


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: str, db: DbSession):
    customer = await CustomerService(db).get_customer(customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer_profile(
    customer_id: str,
    profile: CustomerProfileUpdate,
    db: DbSession,
):
    """Save the profile form; job snapshots follow the customer."""
    return await CustomerService(db).update_profile(customer_id, profile)
