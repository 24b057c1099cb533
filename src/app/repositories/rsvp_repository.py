from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Rsvp, RsvpStatus


class IRsvpRepository(ABC):
    """RSVP repository interface - application layer"""

    @abstractmethod
    async def get_by_guest_and_event(
        self, guest_id: UUID, event_id: UUID
    ) -> Optional[Rsvp]:
        """Get the RSVP of a guest for an event"""
        pass

    @abstractmethod
    async def list_statuses_for_guest(self, guest_id: UUID) -> List[RsvpStatus]:
        """All per-event statuses of a guest"""
        pass

    @abstractmethod
    async def create(self, rsvp: Rsvp) -> Rsvp:
        """Create a new RSVP"""
        pass

    @abstractmethod
    async def update(self, rsvp: Rsvp) -> Rsvp:
        """Update existing RSVP"""
        pass
