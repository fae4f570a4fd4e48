"""Contractor records used for job assignment, billing and filtering."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.contractor import ContractorCreate, ContractorResponse, ContractorUpdate
from ..schemas.contractor import Contractor

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class ContractorService:
    """Service for contractor CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_contractor(self, contractor: ContractorCreate) -> ContractorResponse:
        """
        Add a contractor.

        Raises:
            ValueError: when the name is blank
        """
        values = {field: _clean(value) for field, value in contractor.model_dump().items()}
        if not values["name"]:
            raise ValueError("Contractor name is required.")
        values["billing_name"] = values["billing_name"] or values["name"]

        row = Contractor(**values)
        self.db.add(row)
        await self.db.flush()
        logger.info(f"Created contractor {row.id} ({row.name})")
        return ContractorResponse.model_validate(row)

    async def get_contractor(self, contractor_id: str) -> Optional[ContractorResponse]:
        row = await self.db.get(Contractor, contractor_id)
        if row is None:
            return None
        return ContractorResponse.model_validate(row)

    async def require_contractor(self, contractor_id: str) -> Contractor:
        row = await self.db.get(Contractor, contractor_id)
        if row is None:
            raise NotFoundError("Contractor", contractor_id)
        return row

    async def list_contractors(self) -> list[ContractorResponse]:
        """All contractors by name, as offered by the ops and calendar filters."""
        result = await self.db.execute(select(Contractor).order_by(Contractor.name))
        return [ContractorResponse.model_validate(row) for row in result.scalars().all()]

    async def update_contractor(
        self,
        contractor_id: str,
        update: ContractorUpdate,
    ) -> ContractorResponse:
        row = await self.require_contractor(contractor_id)

        changes = {
            field: _clean(value)
            for field, value in update.model_dump(exclude_unset=True).items()
        }
        if "name" in changes and not changes["name"]:
            raise ValueError("Contractor name is required.")

        for field, value in changes.items():
            setattr(row, field, value)
        await self.db.flush()
        return ContractorResponse.model_validate(row)
