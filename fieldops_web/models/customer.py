"""Pydantic models for customer profiles and their service locations."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class CustomerProfileUpdate(BaseModel):
    """
    Customer profile form.

    Contact and billing fields replace the stored values (blank clears them).
    The service address fields update the customer's primary location and are
    ignored when all of them are blank.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    billing_address_line1: Optional[str] = None
    billing_address_line2: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip: Optional[str] = None

    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None


class LocationResponse(BaseModel):
    """Response model for a service location."""

    id: str
    customer_id: str
    label: Optional[str] = None
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: Optional[str] = None
    zip: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CustomerResponse(BaseModel):
    """Response model for a customer with their locations, oldest first."""

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    billing_address_line1: Optional[str] = None
    billing_address_line2: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip: Optional[str] = None

    created_at: datetime
    updated_at: Optional[datetime] = None
    locations: list[LocationResponse] = Field(default_factory=list)
