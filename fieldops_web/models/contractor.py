"""Pydantic models for contractors."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ContractorCreate(BaseModel):
    """Request model for adding a contractor."""

    name: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None

    billing_name: Optional[str] = Field(default=None, description="Defaults to the contractor name")
    billing_email: Optional[str] = None
    billing_phone: Optional[str] = None
    billing_address_line1: Optional[str] = None
    billing_address_line2: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip: Optional[str] = None


class ContractorUpdate(BaseModel):
    """Request model for editing a contractor; omitted fields are unchanged."""

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None

    billing_name: Optional[str] = None
    billing_email: Optional[str] = None
    billing_phone: Optional[str] = None
    billing_address_line1: Optional[str] = None
    billing_address_line2: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip: Optional[str] = None


class ContractorResponse(BaseModel):
    """Response model for a contractor."""

    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None

    billing_name: Optional[str] = None
    billing_email: Optional[str] = None
    billing_phone: Optional[str] = None
    billing_address_line1: Optional[str] = None
    billing_address_line2: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip: Optional[str] = None

    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
