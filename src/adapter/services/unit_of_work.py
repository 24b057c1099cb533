from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_log_repository import AuditLogRepository
from src.adapter.repositories.checkin_repository import CheckinRepository
from src.adapter.repositories.event_repository import EventRepository
from src.adapter.repositories.guest_repository import GuestRepository
from src.adapter.repositories.household_repository import HouseholdRepository
from src.adapter.repositories.invite_repository import InviteRepository
from src.adapter.repositories.message_repository import MessageRepository
from src.adapter.repositories.rsvp_repository import RsvpRepository
from src.app.services.schema_capabilities import SchemaCapabilities
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession, capabilities: Optional[SchemaCapabilities] = None):
        self.session = session
        self.capabilities = capabilities or SchemaCapabilities.full()

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.households = HouseholdRepository(self.session)
        self.guests = GuestRepository(self.session, self.capabilities)
        self.events = EventRepository(self.session)
        self.rsvps = RsvpRepository(self.session)
        self.invites = InviteRepository(self.session, self.capabilities)
        self.checkins = CheckinRepository(self.session)
        self.audit_logs = AuditLogRepository(self.session)
        self.messages = MessageRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed (including audit entries) is discarded
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
