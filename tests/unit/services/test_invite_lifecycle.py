from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.services.audit_log_writer import AuditAction
from src.app.services.invite_lifecycle import (
    InviteLifecycleManager,
    resolve_expires_at,
    resolve_nullable_int,
)
from src.app.services.schema_capabilities import SchemaCapabilities
from src.domain.base import utcnow
from src.domain.entities import Guest, InviteChannel, InviteStatus
from src.domain.errors import UnsupportedOperation, ValidationError


@pytest.mark.parametrize(
    "value,expected",
    [(None, None), ("", None), (0, None), (-3, None), ("abc", None), ("4", 4), (2, 2)],
)
def test_resolve_nullable_int(value, expected):
    assert resolve_nullable_int(value) == expected


def test_resolve_expires_at():
    now = utcnow()
    assert resolve_expires_at(None, now) is None
    assert resolve_expires_at(7, now) == now + timedelta(days=7)


@pytest.mark.asyncio
async def test_create_for_household_issues_token_and_audits(mock_uow, household):
    actor_id = uuid4()
    manager = InviteLifecycleManager(mock_uow)

    invite = await manager.create_for_household(
        household, channel=InviteChannel.whatsapp, max_uses=2, expires_in_days=10, actor_id=actor_id
    )

    assert invite.household_id == household.id
    assert invite.status == InviteStatus.sent
    assert invite.uses_count == 0
    assert invite.max_uses == 2
    assert invite.token and invite.token_hash == invite.hash_token(invite.token)
    assert invite.expires_at > utcnow() + timedelta(days=9)
    mock_uow.invites.create.assert_called_once()

    entry = mock_uow.audit_logs.create.call_args.args[0]
    assert entry.action == AuditAction.INVITE_CREATED
    assert entry.wedding_id == household.wedding_id
    assert entry.actor_id == actor_id
    assert entry.context["invite_id"] == str(invite.id)
    assert entry.context["channel"] == "whatsapp"


@pytest.mark.asyncio
async def test_create_rejects_guest_of_another_wedding(mock_uow, household):
    outsider = Guest(id=uuid4(), wedding_id=uuid4(), name="Outsider")
    mock_uow.guests.get_by_id.return_value = outsider

    manager = InviteLifecycleManager(mock_uow)
    with pytest.raises(ValidationError) as exc:
        await manager.create_for_household(household, guest_id=outsider.id)

    assert exc.value.code == "INVALID_GUEST_DATA"
    mock_uow.invites.create.assert_not_called()


@pytest.mark.asyncio
async def test_create_ignores_max_uses_without_column(mock_uow, household):
    manager = InviteLifecycleManager(mock_uow, SchemaCapabilities(max_uses=False))

    invite = await manager.create_for_household(household, max_uses=5)

    assert invite.max_uses is None


@pytest.mark.asyncio
async def test_reissue_recovers_revoked_exhausted_invite(mock_uow, household, make_invite):
    invite = make_invite(
        status=InviteStatus.revoked,
        revoked_at=utcnow(),
        revoked_reason="typo",
        uses_count=3,
        max_uses=3,
        used_at=utcnow(),
    )
    old_token = invite.token

    manager = InviteLifecycleManager(mock_uow)
    reissued = await manager.reissue(invite, household.wedding_id, max_uses=5)

    assert reissued.token != old_token
    assert reissued.status == InviteStatus.sent
    assert reissued.uses_count == 0
    assert reissued.max_uses == 5
    assert reissued.revoked_at is None
    assert reissued.revoked_reason is None
    assert reissued.used_at is None
    assert reissued.is_usable()
    assert mock_uow.audit_logs.create.call_args.args[0].action == AuditAction.INVITE_REISSUED


@pytest.mark.asyncio
async def test_reissue_keeps_counters_when_columns_missing(mock_uow, household, make_invite):
    invite = make_invite(uses_count=2, max_uses=2)
    capabilities = SchemaCapabilities(uses_count=False, max_uses=False)

    reissued = await InviteLifecycleManager(mock_uow, capabilities).reissue(
        invite, household.wedding_id
    )

    assert reissued.uses_count == 2
    assert reissued.max_uses == 2


@pytest.mark.asyncio
async def test_revoke_marks_invite_unusable(mock_uow, household, make_invite):
    invite = make_invite()

    revoked = await InviteLifecycleManager(mock_uow).revoke(
        invite, household.wedding_id, reason="wrong household"
    )

    assert revoked.status == InviteStatus.revoked
    assert revoked.revoked_at is not None
    assert revoked.revoked_reason == "wrong household"
    assert not revoked.is_usable()

    entry = mock_uow.audit_logs.create.call_args.args[0]
    assert entry.action == AuditAction.INVITE_REVOKED
    assert entry.context["reason"] == "wrong household"


@pytest.mark.asyncio
async def test_revoke_unsupported_without_revocation_column(mock_uow, household, make_invite):
    manager = InviteLifecycleManager(mock_uow, SchemaCapabilities(revoked_at=False))

    with pytest.raises(UnsupportedOperation) as exc:
        await manager.revoke(make_invite(), household.wedding_id)

    assert exc.value.code == "REVOCATION_UNSUPPORTED"
    mock_uow.invites.update.assert_not_called()
