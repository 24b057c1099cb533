from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from src.domain.entities import Message, MessageLog


class IMessageRepository(ABC):
    """Message delivery log repository interface - application layer"""

    @abstractmethod
    async def create(self, message: Message) -> Message:
        """Create a new outbound message"""
        pass

    @abstractmethod
    async def update(self, message: Message) -> Message:
        """Update existing message"""
        pass

    @abstractmethod
    async def add_log(self, log: MessageLog) -> MessageLog:
        """Create a new message log entry"""
        pass

    @abstractmethod
    async def update_log(self, log: MessageLog) -> MessageLog:
        """Update existing message log entry"""
        pass

    @abstractmethod
    async def count_failed(self, wedding_id: UUID, since: Optional[datetime]) -> int:
        """Number of failed messages of a wedding"""
        pass

    @abstractmethod
    async def list_failed(
        self, wedding_id: UUID, since: Optional[datetime], limit: int
    ) -> List[Tuple[Message, Optional[MessageLog]]]:
        """Failed messages newest first, each with its most recent log entry"""
        pass

    @abstractmethod
    async def list_logs_for_invite(
        self, invite_id: UUID, limit: int = 100
    ) -> List[Tuple[MessageLog, Message]]:
        """Log entries of messages whose payload references the invite"""
        pass
