from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Guest


class IGuestRepository(ABC):
    """Guest repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, guest_id: UUID) -> Optional[Guest]:
        """Get guest by ID"""
        pass

    @abstractmethod
    async def get_by_id_for_update(self, guest_id: UUID) -> Optional[Guest]:
        """Get guest by ID holding a row-level exclusive lock until commit"""
        pass

    @abstractmethod
    async def find_by_contact(
        self,
        wedding_id: UUID,
        email: Optional[str],
        phone: Optional[str],
        raw_phone: Optional[str] = None,
        use_normalized: bool = True,
    ) -> Optional[Guest]:
        """Find a wedding's guest by normalized email or phone"""
        pass

    @abstractmethod
    async def list_by_household(self, household_id: UUID) -> List[Guest]:
        """Household members, adults first then oldest first"""
        pass

    @abstractmethod
    async def create(self, guest: Guest) -> Guest:
        """Create a new guest"""
        pass

    @abstractmethod
    async def update(self, guest: Guest) -> Guest:
        """Update existing guest"""
        pass
