from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Household


class IHouseholdRepository(ABC):
    """Household repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, household_id: UUID) -> Optional[Household]:
        """Get household by ID"""
        pass

    @abstractmethod
    async def create(self, household: Household) -> Household:
        """Create a new household"""
        pass
