"""Customer de-duplication, find-or-create and profile edits."""

import logging
import re
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.customer import CustomerProfileUpdate, CustomerResponse, LocationResponse
from ..schemas.customer import Customer, Location
from ..schemas.job import Job

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
_WHITESPACE = re.compile(r"\s+")


def normalize_phone10(raw: Optional[str]) -> str:
    """Digits only, keeping the last ten (drops a leading country code)."""
    digits = _NON_DIGITS.sub("", raw or "")
    return digits[-10:] if len(digits) > 10 else digits


def normalize_full_name(first: Optional[str], last: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", f"{first or ''} {last or ''}".lower()).strip()


def is_same_customer_by_name_phone(
    input_full_name: str,
    input_phone10: str,
    candidate: Customer,
) -> bool:
    """Same normalized phone and same normalized full name."""
    candidate_phone10 = normalize_phone10(candidate.phone)
    if not candidate_phone10 or candidate_phone10 != input_phone10:
        return False

    candidate_name = candidate.full_name or f"{candidate.first_name or ''} {candidate.last_name or ''}"
    return _WHITESPACE.sub(" ", candidate_name.lower()).strip() == input_full_name


async def find_or_create_customer(
    db: AsyncSession,
    first_name: Optional[str],
    last_name: Optional[str],
    phone: Optional[str],
    email: Optional[str] = None,
    owner_user_id: Optional[str] = None,
) -> tuple[str, bool]:
    """
    Reuse a customer with the same phone number, or create one.

    Returns:
        (customer id, whether an existing customer was reused)
    """
    phone10 = normalize_phone10(phone)
    if phone10:
        area, prefix, line = phone10[:3], phone10[3:6], phone10[6:]
        query = (
            select(Customer)
            .where(
                or_(
                    Customer.phone.like(f"%{phone10}%"),
                    # Matches stored numbers with dashes, spaces or parentheses
                    Customer.phone.like(f"%{area}%{prefix}%{line}%"),
                )
            )
            .limit(25)
        )
        if owner_user_id:
            query = query.where(Customer.owner_user_id == owner_user_id)

        result = await db.execute(query)
        for candidate in result.scalars().all():
            if normalize_phone10(candidate.phone) == phone10:
                return candidate.id, True

    first_name = (first_name or "").strip() or None
    last_name = (last_name or "").strip() or None
    customer = Customer(
        first_name=first_name,
        last_name=last_name,
        full_name=f"{first_name or ''} {last_name or ''}".strip() or None,
        phone=(phone or "").strip() or None,
        email=(email or "").strip() or None,
        owner_user_id=owner_user_id,
    )
    db.add(customer)
    await db.flush()
    return customer.id, False


CUSTOMER_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "email",
    "billing_address_line1",
    "billing_address_line2",
    "billing_city",
    "billing_state",
    "billing_zip",
)
SERVICE_ADDRESS_FIELDS = ("address_line1", "address_line2", "city", "state", "zip")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class CustomerService:
    """Customer profile reads and edits, kept in step with job snapshots."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _locations(self, customer_id: str) -> list[Location]:
        result = await self.db.execute(
            select(Location)
            .where(Location.customer_id == customer_id)
            .order_by(Location.created_at)
        )
        return list(result.scalars().all())

    async def _to_response(self, customer: Customer) -> CustomerResponse:
        locations = await self._locations(customer.id)
        return CustomerResponse(
            **{field: getattr(customer, field) for field in CUSTOMER_PROFILE_FIELDS},
            id=customer.id,
            full_name=customer.full_name,
            created_at=customer.created_at,
            updated_at=customer.updated_at,
            locations=[LocationResponse.model_validate(loc) for loc in locations],
        )

    async def get_customer(self, customer_id: str) -> Optional[CustomerResponse]:
        customer = await self.db.get(Customer, customer_id)
        if customer is None:
            return None
        return await self._to_response(customer)

    async def update_profile(
        self,
        customer_id: str,
        profile: CustomerProfileUpdate,
    ) -> CustomerResponse:
        """
        Save the customer profile form.

        The customer's contact snapshot is copied onto all of their jobs. When
        any service address field is filled, the oldest location is updated
        (or a "Primary" one created) and jobs at that location get the new
        address and city.

        Raises:
            NotFoundError: unknown customer
            ValueError: a service address without street or city
        """
        customer = await self.db.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)

        values = {field: _clean(getattr(profile, field)) for field in CUSTOMER_PROFILE_FIELDS}
        for field, value in values.items():
            setattr(customer, field, value)
        customer.full_name = (
            " ".join(part for part in (values["first_name"], values["last_name"]) if part) or None
        )
        await self.db.flush()

        await self.db.execute(
            update(Job)
            .where(Job.customer_id == customer_id)
            .values(
                customer_first_name=values["first_name"],
                customer_last_name=values["last_name"],
                customer_phone=values["phone"],
                customer_email=values["email"],
            )
        )

        address = {field: _clean(getattr(profile, field)) for field in SERVICE_ADDRESS_FIELDS}
        if any(address.values()):
            if not address["address_line1"] or not address["city"]:
                raise ValueError("Service address and city are required.")

            locations = await self._locations(customer_id)
            if locations:
                location = locations[0]
                for field, value in address.items():
                    setattr(location, field, value)
            else:
                location = Location(customer_id=customer_id, label="Primary", **address)
                self.db.add(location)
            await self.db.flush()

            await self.db.execute(
                update(Job)
                .where(Job.location_id == location.id)
                .values(job_address=address["address_line1"], city=address["city"])
            )

        logger.info(f"Updated customer profile {customer_id}")
        return await self._to_response(customer)
