from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Sequence
from uuid import UUID

from src.domain.entities import AuditLog


class IAuditLogRepository(ABC):
    """AuditLog repository interface - application layer"""

    @abstractmethod
    async def create(self, audit_log: AuditLog) -> AuditLog:
        """Append a new audit entry (immutable)"""
        pass

    @abstractmethod
    async def list_by_context(
        self,
        wedding_id: UUID,
        context_key: str,
        context_value: str,
        actions: Sequence[str],
        limit: int = 100,
    ) -> List[AuditLog]:
        """Entries whose context[context_key] equals context_value, newest first"""
        pass

    @abstractmethod
    async def count_since(
        self, wedding_id: UUID, action: str, since: datetime
    ) -> int:
        """Number of entries of one action since a timestamp"""
        pass
