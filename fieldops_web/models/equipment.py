"""Pydantic models for job systems and equipment."""

from typing import Optional
from pydantic import BaseModel, Field


class EquipmentRow(BaseModel):
    """One equipment row as posted by the intake form."""

    system_location: str = ""
    equipment_role: str = ""
    manufacturer: str = ""
    model: str = ""
    serial: str = ""
    tonnage: str = ""
    refrigerant_type: str = ""
    notes: str = ""

    def is_blank(self) -> bool:
        return not any(
            value.strip()
            for value in (
                self.system_location,
                self.equipment_role,
                self.manufacturer,
                self.model,
                self.serial,
                self.tonnage,
                self.refrigerant_type,
                self.notes,
            )
        )


class EquipmentCreate(BaseModel):
    """Request model for adding equipment to a job."""

    system_location: str = Field(default="", description="System (location) label")
    equipment_role: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial: Optional[str] = None
    tonnage: Optional[float] = None
    refrigerant_type: Optional[str] = None
    notes: Optional[str] = None


class EquipmentUpdate(BaseModel):
    """Request model for editing equipment; omitted fields are unchanged."""

    equipment_role: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial: Optional[str] = None
    tonnage: Optional[float] = None
    refrigerant_type: Optional[str] = None
    notes: Optional[str] = None


class EquipmentResponse(BaseModel):
    """Response model for equipment."""

    id: str
    job_id: str
    system_id: str
    equipment_role: str
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial: Optional[str] = None
    tonnage: Optional[float] = None
    refrigerant_type: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class SystemResponse(BaseModel):
    """Response model for a job system with its equipment."""

    id: str
    job_id: str
    name: str
    equipment: list[EquipmentResponse] = Field(default_factory=list)
