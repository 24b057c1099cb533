from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.rsvp_repository import IRsvpRepository
from src.domain.entities import Rsvp, RsvpStatus


class RsvpRepository(IRsvpRepository):
    """RSVP repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_guest_and_event(
        self, guest_id: UUID, event_id: UUID
    ) -> Optional[Rsvp]:
        stmt = select(Rsvp).where(Rsvp.guest_id == guest_id, Rsvp.event_id == event_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_statuses_for_guest(self, guest_id: UUID) -> List[RsvpStatus]:
        stmt = select(Rsvp.status).where(Rsvp.guest_id == guest_id)
        result = await self.session.execute(stmt)
        return [RsvpStatus(status) for status in result.scalars().all()]

    async def create(self, rsvp: Rsvp) -> Rsvp:
        self.session.add(rsvp)
        await self.session.flush()
        await self.session.refresh(rsvp)
        return rsvp

    async def update(self, rsvp: Rsvp) -> Rsvp:
        self.session.add(rsvp)
        await self.session.flush()
        await self.session.refresh(rsvp)
        return rsvp
