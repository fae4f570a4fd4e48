"""Job systems and equipment."""

import logging
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.equipment import (
    EquipmentCreate,
    EquipmentResponse,
    EquipmentRow,
    EquipmentUpdate,
    SystemResponse,
)
from ..schemas.job import Job
from ..schemas.system import JobEquipment, JobSystem
from ..schemas.test_run import EccTestRun
from .normalizer import normalize_number, normalize_text
from .timeline import add_event

logger = logging.getLogger(__name__)


class EquipmentService:
    """Service for systems (named locations) and their equipment."""

    def __init__(self, db: AsyncSession, actor_id: Optional[str] = None):
        self.db = db
        self.actor_id = actor_id

    async def _get_job(self, job_id: str) -> Job:
        if not job_id:
            raise ValueError("Job ID is required")
        job = await self.db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job", job_id)
        return job

    async def _get_equipment(self, job_id: str, equipment_id: str) -> JobEquipment:
        if not equipment_id:
            raise ValueError("Equipment ID is required")
        item = await self.db.get(JobEquipment, equipment_id)
        if item is None or item.job_id != job_id:
            raise NotFoundError("Equipment", equipment_id)
        return item

    async def get_or_create_system(self, job_id: str, label: str) -> JobSystem:
        """Systems are unique by name within a job."""
        name = (label or "").strip()
        if not name:
            raise ValueError("A system location label is required")

        result = await self.db.execute(
            select(JobSystem).where(JobSystem.job_id == job_id, JobSystem.name == name)
        )
        system = result.scalar_one_or_none()
        if system is None:
            system = JobSystem(job_id=job_id, name=name)
            self.db.add(system)
            await self.db.flush()
        return system

    async def add_equipment(
        self,
        job_id: str,
        equipment: EquipmentCreate,
    ) -> EquipmentResponse:
        await self._get_job(job_id)
        if not equipment.system_location.strip():
            raise ValueError("Equipment must have a system location label")

        system = await self.get_or_create_system(job_id, equipment.system_location)
        item = JobEquipment(
            job_id=job_id,
            system_id=system.id,
            equipment_role=normalize_text(equipment.equipment_role) or "equipment",
            manufacturer=normalize_text(equipment.manufacturer),
            model=normalize_text(equipment.model),
            serial=normalize_text(equipment.serial),
            tonnage=equipment.tonnage,
            refrigerant_type=normalize_text(equipment.refrigerant_type),
            notes=normalize_text(equipment.notes),
        )
        self.db.add(item)
        await self.db.flush()

        await add_event(
            self.db,
            job_id,
            "equipment_added",
            message=f"{item.equipment_role} added to {system.name}",
            meta={"equipment_id": item.id, "system_id": system.id},
            user_id=self.actor_id,
        )
        return EquipmentResponse.model_validate(item)

    async def add_intake_rows(self, job_id: str, rows: list[EquipmentRow]) -> int:
        """
        Store equipment rows posted by the intake form.

        Blank rows are skipped. A row with any value but no location label is
        rejected. Systems are created once per unique label.

        Returns:
            Number of equipment rows stored
        """
        kept = []
        for row in rows:
            if row.is_blank():
                continue
            if not row.system_location.strip():
                raise ValueError("If you add equipment, each system must have a Location Label.")
            kept.append(row)

        for row in kept:
            system = await self.get_or_create_system(job_id, row.system_location)
            self.db.add(
                JobEquipment(
                    job_id=job_id,
                    system_id=system.id,
                    equipment_role=normalize_text(row.equipment_role) or "equipment",
                    manufacturer=normalize_text(row.manufacturer),
                    model=normalize_text(row.model),
                    serial=normalize_text(row.serial),
                    tonnage=normalize_number(row.tonnage),
                    refrigerant_type=normalize_text(row.refrigerant_type),
                    notes=normalize_text(row.notes),
                )
            )
        await self.db.flush()
        return len(kept)

    async def update_equipment(
        self,
        job_id: str,
        equipment_id: str,
        update: EquipmentUpdate,
    ) -> EquipmentResponse:
        item = await self._get_equipment(job_id, equipment_id)
        for field, value in update.model_dump(exclude_unset=True).items():
            if isinstance(value, str):
                value = normalize_text(value)
            if field == "equipment_role" and not value:
                value = "equipment"
            setattr(item, field, value)
        await self.db.flush()
        return EquipmentResponse.model_validate(item)

    async def delete_equipment(self, job_id: str, equipment_id: str) -> None:
        item = await self._get_equipment(job_id, equipment_id)
        system_id = item.system_id

        await self.db.delete(item)
        await self.db.flush()

        await add_event(
            self.db,
            job_id,
            "equipment_removed",
            meta={"equipment_id": equipment_id, "system_id": system_id},
            user_id=self.actor_id,
        )
        await self.cleanup_orphan_system(system_id)

    async def cleanup_orphan_system(self, system_id: str) -> bool:
        """
        Delete a system that has no equipment and no test runs.

        Returns:
            True if the system was deleted
        """
        system = await self.db.get(JobSystem, system_id)
        if system is None:
            return False

        equipment_count = await self.db.scalar(
            select(func.count(JobEquipment.id)).where(JobEquipment.system_id == system_id)
        )
        run_count = await self.db.scalar(
            select(func.count(EccTestRun.id)).where(EccTestRun.system_id == system_id)
        )
        if equipment_count or run_count:
            return False

        await self.db.delete(system)
        await self.db.flush()
        logger.info(f"Removed orphan system {system_id} ({system.name}) from job {system.job_id}")
        return True

    async def list_systems(self, job_id: str) -> list[SystemResponse]:
        result = await self.db.execute(
            select(JobSystem).where(JobSystem.job_id == job_id).order_by(JobSystem.name)
        )
        systems = result.scalars().all()

        result = await self.db.execute(
            select(JobEquipment).where(JobEquipment.job_id == job_id)
        )
        by_system: dict[str, list[EquipmentResponse]] = {}
        for item in result.scalars().all():
            by_system.setdefault(item.system_id, []).append(EquipmentResponse.model_validate(item))

        return [
            SystemResponse(
                id=system.id,
                job_id=system.job_id,
                name=system.name,
                equipment=by_system.get(system.id, []),
            )
            for system in systems
        ]
