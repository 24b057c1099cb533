from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Invite


class IInviteRepository(ABC):
    """Invite repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invite_id: UUID) -> Optional[Invite]:
        """Get invite by ID"""
        pass

    @abstractmethod
    async def get_by_id_for_update(self, invite_id: UUID) -> Optional[Invite]:
        """Get invite by ID holding a row-level exclusive lock until commit"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[Invite]:
        """Get invite by token (hash lookup first, raw token for legacy rows)"""
        pass

    @abstractmethod
    async def get_for_wedding(
        self, invite_id: UUID, wedding_id: UUID
    ) -> Optional[Invite]:
        """Get invite by ID only if its household belongs to the wedding"""
        pass

    @abstractmethod
    async def get_by_ids_for_wedding(
        self, invite_ids: List[UUID], wedding_id: UUID
    ) -> List[Invite]:
        """Get invites by IDs, keeping only those whose household belongs to the wedding"""
        pass

    @abstractmethod
    async def create(self, invite: Invite) -> Invite:
        """Create a new invite"""
        pass

    @abstractmethod
    async def update(self, invite: Invite) -> Invite:
        """Update existing invite"""
        pass
