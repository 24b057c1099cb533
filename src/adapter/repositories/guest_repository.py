from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.optional_columns import OptionalColumns
from src.app.repositories.guest_repository import IGuestRepository
from src.app.services.schema_capabilities import SchemaCapabilities
from src.domain.entities import Guest


class GuestRepository(IGuestRepository):
    """Guest repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession, capabilities: Optional[SchemaCapabilities] = None):
        self.session = session
        capabilities = capabilities or SchemaCapabilities.full()
        self.optional = OptionalColumns(
            Guest,
            () if capabilities.normalized_contacts else ("normalized_email", "normalized_phone"),
        )

    def _select(self):
        return select(Guest).options(*self.optional.options())

    async def get_by_id(self, guest_id: UUID) -> Optional[Guest]:
        result = await self.session.execute(self._select().where(Guest.id == guest_id))
        return self.optional.fill(result.scalar_one_or_none())

    async def get_by_id_for_update(self, guest_id: UUID) -> Optional[Guest]:
        # populate_existing so the locked read wins over the identity map
        stmt = (
            self._select()
            .where(Guest.id == guest_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return self.optional.fill(result.scalar_one_or_none())

    async def find_by_contact(
        self,
        wedding_id: UUID,
        email: Optional[str],
        phone: Optional[str],
        raw_phone: Optional[str] = None,
        use_normalized: bool = True,
    ) -> Optional[Guest]:
        use_normalized = use_normalized and not self.optional.missing
        conditions = []
        if email:
            if use_normalized:
                conditions.append(Guest.normalized_email == email)
            conditions.append(func.lower(Guest.email) == email)
        if phone:
            if use_normalized:
                conditions.append(Guest.normalized_phone == phone)
            elif raw_phone:
                conditions.append(Guest.phone == raw_phone)

        if not conditions:
            return None

        stmt = (
            self._select()
            .where(Guest.wedding_id == wedding_id, or_(*conditions))
            .order_by(Guest.created_at)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return self.optional.fill(result.scalar_one_or_none())

    async def list_by_household(self, household_id: UUID) -> List[Guest]:
        stmt = (
            self._select()
            .where(Guest.household_id == household_id)
            .order_by(Guest.is_child, Guest.created_at)
        )
        result = await self.session.execute(stmt)
        return self.optional.fill_all(list(result.scalars().all()))

    async def create(self, guest: Guest) -> Guest:
        self.optional.before_insert(guest)
        self.session.add(guest)
        await self.session.flush()
        await self.session.refresh(guest, attribute_names=self.optional.loaded_names())
        return self.optional.fill(guest)

    async def update(self, guest: Guest) -> Guest:
        self.optional.before_update(guest)
        self.session.add(guest)
        await self.session.flush()
        await self.session.refresh(guest, attribute_names=self.optional.loaded_names())
        return self.optional.fill(guest)
