from datetime import datetime
from typing import List, Sequence
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.audit_log_repository import IAuditLogRepository
from src.domain.entities import AuditLog


class AuditLogRepository(IAuditLogRepository):
    """AuditLog repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_log: AuditLog) -> AuditLog:
        """Append a new audit entry (immutable)"""
        self.session.add(audit_log)
        await self.session.flush()
        await self.session.refresh(audit_log)
        return audit_log

    async def list_by_context(
        self,
        wedding_id: UUID,
        context_key: str,
        context_value: str,
        actions: Sequence[str],
        limit: int = 100,
    ) -> List[AuditLog]:
        """
        Entries whose JSON context references an entity.

        The id lives inside the context map, so the match goes through the
        dialect's JSON extraction (json_extract / ->> / JSON_EXTRACT).
        """
        stmt = (
            select(AuditLog)
            .where(
                AuditLog.wedding_id == wedding_id,
                AuditLog.action.in_(list(actions)),
                AuditLog.context[context_key].as_string() == context_value,
            )
            .order_by(AuditLog.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_since(
        self, wedding_id: UUID, action: str, since: datetime
    ) -> int:
        stmt = select(func.count(AuditLog.id)).where(
            AuditLog.wedding_id == wedding_id,
            AuditLog.action == action,
            AuditLog.created_at >= since,
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one() or 0)
