from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.services.audit_log_writer import AuditAction
from src.app.use_cases.rsvp import GuestData, SubmitPublicRsvpUseCase
from src.domain.base import utcnow
from src.domain.entities import Guest, Rsvp, RsvpStatus


@pytest.fixture
def guest_store(mock_uow):
    """Guests created during the submission become lockable by id."""
    store = {}

    async def create(guest):
        store[guest.id] = guest
        return guest

    async def get_for_update(guest_id):
        return store.get(guest_id)

    mock_uow.guests.create.side_effect = create
    mock_uow.guests.get_by_id_for_update.side_effect = get_for_update
    return store


def _actions(mock_uow):
    return [call.args[0].action for call in mock_uow.audit_logs.create.call_args_list]


@pytest.mark.asyncio
async def test_open_mode_creates_household_and_guest(mock_uow, event, guest_store):
    mock_uow.events.get_by_id.return_value = event
    mock_uow.rsvps.list_statuses_for_guest.return_value = [RsvpStatus.confirmed]

    use_case = SubmitPublicRsvpUseCase(mock_uow, default_access="open")
    result = await use_case.execute(
        event_id=event.id,
        status="confirmado",
        guest=GuestData(name="  Bruno Costa ", email="Bruno@Example.com"),
    )

    assert result.is_ok()
    assert result.value.access_mode == "open"
    assert result.value.status == "confirmed"
    assert result.value.created is True
    assert result.value.overall_rsvp_status == "confirmed"
    assert result.value.invite_id is None

    household = mock_uow.households.create.call_args.args[0]
    assert household.wedding_id == event.wedding_id
    assert household.name == "Bruno Costa"

    (created_guest,) = guest_store.values()
    assert created_guest.normalized_email == "bruno@example.com"
    assert created_guest.household_id == household.id

    assert _actions(mock_uow) == [AuditAction.RSVP_PUBLIC_SUBMITTED]
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_inactive_event_is_rejected(mock_uow, event):
    event.is_active = False
    mock_uow.events.get_by_id.return_value = event

    result = await SubmitPublicRsvpUseCase(mock_uow).execute(
        event_id=event.id, status="confirmed", guest=GuestData(name="Ana")
    )

    assert result.is_err()
    assert result.error.code == "EVENT_INACTIVE"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_event_is_not_found(mock_uow):
    result = await SubmitPublicRsvpUseCase(mock_uow).execute(event_id=uuid4(), status="confirmed")

    assert result.error.code == "EVENT_NOT_FOUND"


@pytest.mark.asyncio
async def test_token_only_event_requires_invite(mock_uow, event):
    event.rules = {"access": {"mode": "token_only"}}
    mock_uow.events.get_by_id.return_value = event

    result = await SubmitPublicRsvpUseCase(mock_uow).execute(
        event_id=event.id, status="confirmed", guest=GuestData(name="Ana")
    )

    assert result.error.code == "INVITE_REQUIRED"


@pytest.mark.asyncio
async def test_name_required_when_collected(mock_uow, event):
    mock_uow.events.get_by_id.return_value = event

    result = await SubmitPublicRsvpUseCase(mock_uow).execute(
        event_id=event.id, status="confirmed", guest=GuestData(email="ana@example.com")
    )

    assert result.error.code == "INVALID_GUEST_DATA"


@pytest.mark.asyncio
async def test_restricted_without_contact_is_invalid(mock_uow, event):
    mock_uow.events.get_by_id.return_value = event

    result = await SubmitPublicRsvpUseCase(mock_uow, default_access="restricted").execute(
        event_id=event.id, status="confirmed", guest=GuestData(name="Ana")
    )

    assert result.error.code == "INVALID_GUEST_DATA"


@pytest.mark.asyncio
async def test_restricted_unknown_contact_is_forbidden(mock_uow, event):
    mock_uow.events.get_by_id.return_value = event

    result = await SubmitPublicRsvpUseCase(mock_uow, default_access="restricted").execute(
        event_id=event.id,
        status="confirmed",
        guest=GuestData(name="Stranger", email="stranger@example.com"),
    )

    assert result.error.code == "RSVP_RESTRICTED"
    mock_uow.guests.create.assert_not_called()
    mock_uow.rsvps.create.assert_not_called()


@pytest.mark.asyncio
async def test_restricted_matches_existing_guest_by_phone(mock_uow, event, guest):
    mock_uow.events.get_by_id.return_value = event
    mock_uow.guests.find_by_contact.return_value = guest
    mock_uow.guests.get_by_id_for_update.return_value = guest

    result = await SubmitPublicRsvpUseCase(mock_uow, default_access="restricted").execute(
        event_id=event.id,
        status="declined",
        guest=GuestData(name="Ana", phone="11 98888 7777"),
    )

    assert result.is_ok()
    assert result.value.guest_id == str(guest.id)
    assert result.value.access_mode == "restricted"
    assert mock_uow.guests.find_by_contact.call_args.args == (event.wedding_id, None, "11988887777")
    mock_uow.guests.create.assert_not_called()


@pytest.mark.asyncio
async def test_pinned_invite_answers_for_its_guest_and_counts_use(
    mock_uow, event, guest, household, make_invite
):
    invite = make_invite(guest_id=guest.id, max_uses=2)
    locked_invite = make_invite(id=invite.id, guest_id=guest.id, max_uses=2)
    mock_uow.events.get_by_id.return_value = event
    mock_uow.invites.get_by_token.return_value = invite
    mock_uow.invites.get_by_id_for_update.return_value = locked_invite
    mock_uow.households.get_by_id.return_value = household
    mock_uow.guests.get_by_id.return_value = guest
    mock_uow.guests.get_by_id_for_update.return_value = guest

    result = await SubmitPublicRsvpUseCase(mock_uow, default_access="restricted").execute(
        event_id=event.id, status="maybe", token=invite.token, guest=GuestData(name="Ana")
    )

    assert result.is_ok()
    assert result.value.access_mode == "token"
    assert result.value.guest_id == str(guest.id)
    assert result.value.invite_id == str(invite.id)
    assert result.value.invite_uses_count == 1
    assert locked_invite.uses_count == 1
    assert locked_invite.used_at is not None
    assert _actions(mock_uow) == [AuditAction.INVITE_USED, AuditAction.RSVP_PUBLIC_SUBMITTED]


@pytest.mark.asyncio
async def test_household_invite_adds_new_guest_to_household(
    mock_uow, event, household, make_invite, guest_store
):
    invite = make_invite()
    mock_uow.events.get_by_id.return_value = event
    mock_uow.invites.get_by_token.return_value = invite
    mock_uow.invites.get_by_id_for_update.return_value = invite
    mock_uow.households.get_by_id.return_value = household

    result = await SubmitPublicRsvpUseCase(mock_uow).execute(
        event_id=event.id,
        status="confirmed",
        token=invite.token,
        guest=GuestData(name="Carla", is_child=True),
    )

    assert result.is_ok()
    (created_guest,) = guest_store.values()
    assert created_guest.household_id == household.id
    assert created_guest.is_child is True
    mock_uow.households.create.assert_not_called()


@pytest.mark.asyncio
async def test_invite_exhausted_by_concurrent_submission_rolls_back(
    mock_uow, event, guest, household, make_invite
):
    # Pre-check sees one use left; the locked row was consumed by a racing request
    invite = make_invite(guest_id=guest.id, max_uses=1, uses_count=0)
    locked_invite = make_invite(id=invite.id, guest_id=guest.id, max_uses=1, uses_count=1)
    mock_uow.events.get_by_id.return_value = event
    mock_uow.invites.get_by_token.return_value = invite
    mock_uow.invites.get_by_id_for_update.return_value = locked_invite
    mock_uow.households.get_by_id.return_value = household
    mock_uow.guests.get_by_id.return_value = guest
    mock_uow.guests.get_by_id_for_update.return_value = guest

    result = await SubmitPublicRsvpUseCase(mock_uow).execute(
        event_id=event.id, status="confirmed", token=invite.token, guest=GuestData(name="Ana")
    )

    assert result.is_err()
    assert result.error.code == "INVITE_EXHAUSTED"
    assert locked_invite.uses_count == 1
    mock_uow.invites.update.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_expired_invite_is_gone(mock_uow, event, household, make_invite):
    invite = make_invite(expires_at=utcnow() - timedelta(hours=1))
    mock_uow.events.get_by_id.return_value = event
    mock_uow.invites.get_by_token.return_value = invite
    mock_uow.households.get_by_id.return_value = household

    result = await SubmitPublicRsvpUseCase(mock_uow).execute(
        event_id=event.id, status="confirmed", token=invite.token, guest=GuestData(name="Ana")
    )

    assert result.error.code == "INVITE_EXPIRED"


@pytest.mark.asyncio
async def test_locked_answer_cannot_be_changed(mock_uow, event, guest):
    event.rules = {"access": {"mode": "restricted", "allow_response_update": False}}
    mock_uow.events.get_by_id.return_value = event
    mock_uow.guests.find_by_contact.return_value = guest
    mock_uow.guests.get_by_id_for_update.return_value = guest
    mock_uow.rsvps.get_by_guest_and_event.return_value = Rsvp(
        guest_id=guest.id, event_id=event.id, status=RsvpStatus.confirmed
    )

    result = await SubmitPublicRsvpUseCase(mock_uow).execute(
        event_id=event.id,
        status="declined",
        guest=GuestData(name="Ana", email="ana@example.com"),
    )

    assert result.error.code == "RSVP_ALREADY_ANSWERED"
    mock_uow.rsvps.update.assert_not_called()


@pytest.mark.asyncio
async def test_resubmission_updates_existing_rsvp(mock_uow, event, guest):
    existing = Rsvp(guest_id=guest.id, event_id=event.id, status=RsvpStatus.confirmed)
    mock_uow.events.get_by_id.return_value = event
    mock_uow.guests.find_by_contact.return_value = guest
    mock_uow.guests.get_by_id_for_update.return_value = guest
    mock_uow.rsvps.get_by_guest_and_event.return_value = existing
    mock_uow.rsvps.list_statuses_for_guest.return_value = [RsvpStatus.declined]

    result = await SubmitPublicRsvpUseCase(mock_uow, default_access="restricted").execute(
        event_id=event.id,
        status="recusado",
        guest=GuestData(name="Ana", email="ANA@example.com"),
    )

    assert result.is_ok()
    assert result.value.created is False
    assert existing.status == RsvpStatus.declined
    assert guest.overall_rsvp_status == RsvpStatus.declined
    mock_uow.rsvps.create.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_answer_is_rejected_before_any_write(mock_uow, event):
    event.questions = [{"label": "Guests", "type": "number", "required": True}]
    mock_uow.events.get_by_id.return_value = event

    result = await SubmitPublicRsvpUseCase(mock_uow).execute(
        event_id=event.id,
        status="confirmed",
        guest=GuestData(name="Ana"),
        responses={"guests": "many"},
    )

    assert result.error.code == "INVALID_ANSWER"
    mock_uow.households.create.assert_not_called()


def test_guest_without_collected_name_falls_back_to_contact():
    from src.app.services.rsvp_access_rules import RsvpAccessRules

    rules = RsvpAccessRules(collect_name=False)
    data = SubmitPublicRsvpUseCase._apply_guest_rules(
        GuestData(email=" Zoe@Example.com "), rules
    )

    assert data.name == "zoe@example.com"
    assert SubmitPublicRsvpUseCase._apply_guest_rules(GuestData(), rules).name == "Guest"
