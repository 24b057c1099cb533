from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.services.audit_log_writer import AuditAction
from src.app.services.delivery_channel import DeliveryResult
from src.app.services.invite_incidents import resolve_range_start, retry_block_reason
from src.app.use_cases.incidents import (
    GetInviteIncidentsUseCase,
    GetInviteTimelineUseCase,
    RetryFailedByChannelUseCase,
    RetryInviteUseCase,
)
from src.domain.base import utcnow
from src.domain.entities import InviteChannel, Message, MessageLog, MessageStatus


@pytest.fixture
def delivery_channel():
    channel = MagicMock()
    channel.send = AsyncMock(return_value=DeliveryResult(True, "Invite sent successfully."))
    return channel


def _failed(invite, channel=InviteChannel.email, minutes_ago=0, error="timeout"):
    message = Message(
        wedding_id=uuid4(),
        channel=channel,
        payload={"invite_id": str(invite.id)},
        status=MessageStatus.failed,
        created_at=utcnow() - timedelta(minutes=minutes_ago),
    )
    log = MessageLog(message_id=message.id, status=MessageStatus.failed, details={"error": error})
    return message, log


def test_range_start():
    now = datetime(2026, 6, 30)
    assert resolve_range_start("7d", now) == datetime(2026, 6, 23)
    assert resolve_range_start("bogus", now) == datetime(2026, 5, 31)
    assert resolve_range_start("all", now) is None


@pytest.mark.parametrize(
    "overrides,reason",
    [
        ({}, None),
        ({"revoked_at": datetime(2026, 1, 1)}, "revoked"),
        ({"expires_at": datetime(2000, 1, 1)}, "expired"),
        ({"max_uses": 1, "uses_count": 1}, "exhausted"),
    ],
)
def test_retry_block_reason(make_invite, overrides, reason):
    assert retry_block_reason(make_invite(**overrides)) == reason


def test_missing_invite_cannot_be_retried():
    assert retry_block_reason(None) == "not found"


@pytest.mark.asyncio
async def test_incident_summary_groups_failures(mock_uow, make_invite, household, guest):
    retryable = make_invite(guest_id=guest.id)
    exhausted = make_invite(channel=InviteChannel.whatsapp, max_uses=1, uses_count=1)
    mock_uow.messages.count_failed.return_value = 3
    mock_uow.messages.list_failed.return_value = [
        _failed(retryable, minutes_ago=1, error="smtp down"),
        _failed(exhausted, channel=InviteChannel.whatsapp, minutes_ago=2),
        _failed(retryable, minutes_ago=30),
    ]
    mock_uow.invites.get_by_ids_for_wedding.return_value = [retryable, exhausted]
    mock_uow.households.get_by_id.return_value = household
    mock_uow.guests.get_by_id.return_value = guest

    result = await GetInviteIncidentsUseCase(mock_uow).execute(household.wedding_id, "7d")

    assert result.is_ok()
    summary = result.value
    assert summary.failed_messages_total == 3
    assert summary.failed_invites_total == 2
    assert [(c.channel, c.failed_messages, c.impacted_invites) for c in summary.failed_channels] == [
        ("email", 2, 1),
        ("whatsapp", 1, 1),
    ]

    first, second = summary.failed_queue
    assert first.invite_id == str(retryable.id)
    assert first.failed_attempts == 2
    assert first.error == "smtp down"
    assert first.can_retry is True
    assert first.household == household.name
    assert first.guest == guest.name
    assert second.can_retry is False
    assert second.retry_block_reason == "exhausted"


@pytest.mark.asyncio
async def test_retry_sends_and_audits(mock_uow, make_invite, household, delivery_channel):
    invite = make_invite()
    mock_uow.invites.get_for_wedding.return_value = invite

    result = await RetryInviteUseCase(mock_uow, delivery_channel).execute(
        household.wedding_id, invite.id
    )

    assert result.value.ok is True
    assert result.value.type == "sent"
    delivery_channel.send.assert_called_once_with(invite)
    assert mock_uow.audit_logs.create.call_args.args[0].action == AuditAction.INVITE_RETRY_SENT
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_retry_of_revoked_invite_is_blocked(mock_uow, make_invite, household, delivery_channel):
    mock_uow.invites.get_for_wedding.return_value = make_invite(revoked_at=utcnow())

    result = await RetryInviteUseCase(mock_uow, delivery_channel).execute(
        household.wedding_id, uuid4()
    )

    assert result.value.ok is False
    assert result.value.type == "blocked"
    assert result.value.message == "revoked"
    delivery_channel.send.assert_not_called()


@pytest.mark.asyncio
async def test_retry_failure_is_recorded(mock_uow, make_invite, household, delivery_channel):
    invite = make_invite()
    mock_uow.invites.get_for_wedding.return_value = invite
    delivery_channel.send.return_value = DeliveryResult(False, "Failed to send invite: boom")

    result = await RetryInviteUseCase(mock_uow, delivery_channel).execute(
        household.wedding_id, invite.id
    )

    assert result.value.type == "failed"
    entry = mock_uow.audit_logs.create.call_args.args[0]
    assert entry.action == AuditAction.INVITE_RETRY_FAILED
    assert entry.context["error"] == "Failed to send invite: boom"


@pytest.mark.asyncio
async def test_retry_of_unknown_invite_is_not_found(mock_uow, household, delivery_channel):
    result = await RetryInviteUseCase(mock_uow, delivery_channel).execute(
        household.wedding_id, uuid4()
    )

    assert result.value.type == "not_found"


@pytest.mark.asyncio
async def test_retry_by_channel_only_touches_that_channel(
    mock_uow, make_invite, household, delivery_channel
):
    email_ok = make_invite()
    email_revoked = make_invite(revoked_at=utcnow())
    sms = make_invite(channel=InviteChannel.sms)
    invites = {i.id: i for i in (email_ok, email_revoked, sms)}

    mock_uow.messages.list_failed.return_value = [
        _failed(email_ok),
        _failed(email_revoked, minutes_ago=1),
        _failed(sms, channel=InviteChannel.sms, minutes_ago=2),
    ]
    mock_uow.invites.get_by_ids_for_wedding.return_value = list(invites.values())
    mock_uow.invites.get_for_wedding.side_effect = lambda invite_id, wedding_id: invites.get(invite_id)

    result = await RetryFailedByChannelUseCase(mock_uow, delivery_channel).execute(
        household.wedding_id, "email"
    )

    assert result.is_ok()
    assert result.value.total == 2
    assert result.value.sent == 1
    assert result.value.blocked == 1
    delivery_channel.send.assert_called_once_with(email_ok)


@pytest.mark.asyncio
async def test_retry_by_unknown_channel_is_rejected(mock_uow, household, delivery_channel):
    result = await RetryFailedByChannelUseCase(mock_uow, delivery_channel).execute(
        household.wedding_id, "pigeon"
    )

    assert result.error.code == "INVALID_CHANNEL"


@pytest.mark.asyncio
async def test_invite_timeline_with_text(mock_uow, make_invite, household):
    invite = make_invite(created_at=datetime(2026, 2, 1, 18, 30))
    mock_uow.invites.get_for_wedding.return_value = invite

    result = await GetInviteTimelineUseCase(mock_uow).execute(
        household.wedding_id, invite.id, include_text=True
    )

    assert result.is_ok()
    assert result.value.invite_id == str(invite.id)
    assert len(result.value.events) == 1
    assert result.value.text == "[01/02/2026 18:30] Invite created - Channel: Email"


@pytest.mark.asyncio
async def test_invite_timeline_of_foreign_invite(mock_uow, household):
    result = await GetInviteTimelineUseCase(mock_uow).execute(household.wedding_id, uuid4())

    assert result.error.code == "INVITE_NOT_FOUND"
