from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.household_repository import IHouseholdRepository
from src.domain.entities import Household


class HouseholdRepository(IHouseholdRepository):
    """Household repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, household_id: UUID) -> Optional[Household]:
        stmt = select(Household).where(Household.id == household_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, household: Household) -> Household:
        self.session.add(household)
        await self.session.flush()
        await self.session.refresh(household)
        return household
