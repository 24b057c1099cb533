from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.message_repository import IMessageRepository
from src.domain.entities import Message, MessageLog, MessageStatus


class MessageRepository(IMessageRepository):
    """Message delivery log repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, message: Message) -> Message:
        self.session.add(message)
        await self.session.flush()
        await self.session.refresh(message)
        return message

    async def update(self, message: Message) -> Message:
        self.session.add(message)
        await self.session.flush()
        await self.session.refresh(message)
        return message

    async def add_log(self, log: MessageLog) -> MessageLog:
        self.session.add(log)
        await self.session.flush()
        await self.session.refresh(log)
        return log

    async def update_log(self, log: MessageLog) -> MessageLog:
        self.session.add(log)
        await self.session.flush()
        await self.session.refresh(log)
        return log

    def _failed_query(self, stmt, wedding_id: UUID, since: Optional[datetime]):
        stmt = stmt.where(
            Message.wedding_id == wedding_id, Message.status == MessageStatus.failed
        )
        if since is not None:
            stmt = stmt.where(Message.created_at >= since)
        return stmt

    async def count_failed(self, wedding_id: UUID, since: Optional[datetime]) -> int:
        stmt = self._failed_query(select(func.count(Message.id)), wedding_id, since)
        result = await self.session.execute(stmt)
        return int(result.scalar_one() or 0)

    async def list_failed(
        self, wedding_id: UUID, since: Optional[datetime], limit: int
    ) -> List[Tuple[Message, Optional[MessageLog]]]:
        stmt = self._failed_query(select(Message), wedding_id, since)
        stmt = stmt.order_by(Message.created_at.desc()).limit(limit)
        messages = list((await self.session.execute(stmt)).scalars().all())
        if not messages:
            return []

        logs_stmt = (
            select(MessageLog)
            .where(MessageLog.message_id.in_([m.id for m in messages]))
            .order_by(MessageLog.occurred_at.desc())
        )
        latest: Dict[UUID, MessageLog] = {}
        for log in (await self.session.execute(logs_stmt)).scalars().all():
            latest.setdefault(log.message_id, log)

        return [(message, latest.get(message.id)) for message in messages]

    async def list_logs_for_invite(
        self, invite_id: UUID, limit: int = 100
    ) -> List[Tuple[MessageLog, Message]]:
        stmt = (
            select(MessageLog, Message)
            .join(Message, Message.id == MessageLog.message_id)
            .where(Message.payload["invite_id"].as_string() == str(invite_id))
            .order_by(MessageLog.occurred_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(log, message) for log, message in result.all()]
