from abc import ABC, abstractmethod

from src.app.repositories.audit_log_repository import IAuditLogRepository
from src.app.repositories.checkin_repository import ICheckinRepository
from src.app.repositories.event_repository import IEventRepository
from src.app.repositories.guest_repository import IGuestRepository
from src.app.repositories.household_repository import IHouseholdRepository
from src.app.repositories.invite_repository import IInviteRepository
from src.app.repositories.message_repository import IMessageRepository
from src.app.repositories.rsvp_repository import IRsvpRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    households: IHouseholdRepository
    guests: IGuestRepository
    events: IEventRepository
    rsvps: IRsvpRepository
    invites: IInviteRepository
    checkins: ICheckinRepository
    audit_logs: IAuditLogRepository
    messages: IMessageRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
