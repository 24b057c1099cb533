from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.domain.entities import Checkin


class ICheckinRepository(ABC):
    """Checkin repository interface - application layer"""

    @abstractmethod
    async def get_latest_for_guest(
        self, guest_id: UUID, event_id: Optional[UUID]
    ) -> Optional[Checkin]:
        """Most recent check-in for (guest, event); event None matches NULL"""
        pass

    @abstractmethod
    async def create(self, checkin: Checkin) -> Optional[Checkin]:
        """Create a new check-in; None when one already exists for (guest, event)"""
        pass

    @abstractmethod
    async def list_for_wedding(
        self,
        wedding_id: UUID,
        event_id: Optional[UUID] = None,
        method: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        """Filtered check-ins joined with guest and event, newest first"""
        pass

    @abstractmethod
    async def summarize_for_wedding(
        self,
        wedding_id: UUID,
        event_id: Optional[UUID] = None,
        method: Optional[str] = None,
        search: Optional[str] = None,
        today_start: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Totals, unique guests, today's count, by_method and by_event"""
        pass
