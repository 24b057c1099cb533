import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from src.domain.entities import Event, Guest, Household, Invite, InviteChannel, InviteStatus


def _passthrough(entity):
    return entity


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.households = MagicMock()
    uow.households.get_by_id = AsyncMock(return_value=None)
    uow.households.create = AsyncMock(side_effect=_passthrough)

    uow.guests = MagicMock()
    uow.guests.get_by_id = AsyncMock(return_value=None)
    uow.guests.get_by_id_for_update = AsyncMock(return_value=None)
    uow.guests.find_by_contact = AsyncMock(return_value=None)
    uow.guests.list_by_household = AsyncMock(return_value=[])
    uow.guests.create = AsyncMock(side_effect=_passthrough)
    uow.guests.update = AsyncMock(side_effect=_passthrough)

    uow.events = MagicMock()
    uow.events.get_by_id = AsyncMock(return_value=None)
    uow.events.create = AsyncMock(side_effect=_passthrough)
    uow.events.update = AsyncMock(side_effect=_passthrough)

    uow.rsvps = MagicMock()
    uow.rsvps.get_by_guest_and_event = AsyncMock(return_value=None)
    uow.rsvps.list_statuses_for_guest = AsyncMock(return_value=[])
    uow.rsvps.create = AsyncMock(side_effect=_passthrough)
    uow.rsvps.update = AsyncMock(side_effect=_passthrough)

    uow.invites = MagicMock()
    uow.invites.get_by_id = AsyncMock(return_value=None)
    uow.invites.get_by_id_for_update = AsyncMock(return_value=None)
    uow.invites.get_by_token = AsyncMock(return_value=None)
    uow.invites.get_for_wedding = AsyncMock(return_value=None)
    uow.invites.get_by_ids_for_wedding = AsyncMock(return_value=[])
    uow.invites.create = AsyncMock(side_effect=_passthrough)
    uow.invites.update = AsyncMock(side_effect=_passthrough)

    uow.checkins = MagicMock()
    uow.checkins.get_latest_for_guest = AsyncMock(return_value=None)
    uow.checkins.create = AsyncMock(side_effect=_passthrough)
    uow.checkins.list_for_wedding = AsyncMock(return_value=[])
    uow.checkins.summarize_for_wedding = AsyncMock(return_value={})

    uow.audit_logs = MagicMock()
    uow.audit_logs.create = AsyncMock(side_effect=_passthrough)
    uow.audit_logs.list_by_context = AsyncMock(return_value=[])
    uow.audit_logs.count_since = AsyncMock(return_value=0)

    uow.messages = MagicMock()
    uow.messages.create = AsyncMock(side_effect=_passthrough)
    uow.messages.update = AsyncMock(side_effect=_passthrough)
    uow.messages.add_log = AsyncMock(side_effect=_passthrough)
    uow.messages.update_log = AsyncMock(side_effect=_passthrough)
    uow.messages.count_failed = AsyncMock(return_value=0)
    uow.messages.list_failed = AsyncMock(return_value=[])
    uow.messages.list_logs_for_invite = AsyncMock(return_value=[])

    return uow


@pytest.fixture
def wedding_id():
    return uuid4()


@pytest.fixture
def household(wedding_id):
    return Household(id=uuid4(), wedding_id=wedding_id, name="Silva Family")


@pytest.fixture
def guest(wedding_id, household):
    guest = Guest(id=uuid4(), wedding_id=wedding_id, household_id=household.id, name="Ana Silva")
    guest.set_contacts("Ana@Example.com", "+55 (11) 98888-7777")
    return guest


@pytest.fixture
def event(wedding_id):
    return Event(id=uuid4(), wedding_id=wedding_id, name="Ceremony", slug="ceremony", is_active=True)


@pytest.fixture
def make_invite(household):
    def _make(**overrides):
        invite = Invite(
            id=uuid4(),
            household_id=household.id,
            channel=InviteChannel.email,
            status=InviteStatus.sent,
            token="placeholder",
        )
        invite.assign_token()
        for field, value in overrides.items():
            setattr(invite, field, value)
        return invite

    return _make
