from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Event


class IEventRepository(ABC):
    """Event repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, event_id: UUID) -> Optional[Event]:
        """Get event by ID"""
        pass

    @abstractmethod
    async def create(self, event: Event) -> Event:
        """Create a new event"""
        pass

    @abstractmethod
    async def update(self, event: Event) -> Event:
        """Update existing event"""
        pass
