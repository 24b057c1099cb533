"""
Invite Lifecycle Manager

Creates, reissues and revokes invites. Owns the uses/expiry/revocation
state machine:

    sent -> {delivered, opened, expired, revoked}
    revoked / expired -> sent   (only through reissue)

Callers own the transaction; nothing here commits.
"""

from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

from src.app.services.audit_log_writer import AuditAction, AuditLogWriter
from src.app.services.schema_capabilities import SchemaCapabilities
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Household, Invite, InviteChannel, InviteStatus
from src.domain.errors import UnsupportedOperation, ValidationError


def resolve_nullable_int(value: Any) -> Optional[int]:
    """Positive int or None; blanks, zero and negatives mean "no limit"."""
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def resolve_expires_at(expires_in_days: Any, now: Optional[datetime] = None) -> Optional[datetime]:
    days = resolve_nullable_int(expires_in_days)
    if days is None:
        return None
    return (now or utcnow()) + timedelta(days=days)


class InviteLifecycleManager:
    def __init__(self, uow: UnitOfWork, capabilities: Optional[SchemaCapabilities] = None):
        self.uow = uow
        self.capabilities = capabilities or SchemaCapabilities.full()
        self.audit = AuditLogWriter(uow)

    async def create_for_household(
        self,
        household: Household,
        guest_id: Optional[UUID] = None,
        channel: Optional[InviteChannel] = None,
        max_uses: Any = None,
        expires_in_days: Any = None,
        actor_id: Optional[UUID] = None,
    ) -> Invite:
        """
        Issue a fresh invite for a household, optionally pinned to a guest.

        Raises:
            ValidationError: INVALID_GUEST_DATA when the pinned guest is
                unknown or belongs to another wedding
        """
        if guest_id is not None:
            guest = await self.uow.guests.get_by_id(guest_id)
            if guest is None or guest.wedding_id != household.wedding_id:
                raise ValidationError(
                    "INVALID_GUEST_DATA", "Guest is not valid for this wedding."
                )

        invite = Invite(
            household_id=household.id,
            guest_id=guest_id,
            created_by=actor_id,
            channel=channel or InviteChannel.email,
            status=InviteStatus.sent,
            expires_at=resolve_expires_at(expires_in_days),
        )
        invite.assign_token()
        if self.capabilities.max_uses:
            invite.max_uses = resolve_nullable_int(max_uses)

        invite = await self.uow.invites.create(invite)

        await self.audit.record(
            wedding_id=household.wedding_id,
            action=AuditAction.INVITE_CREATED,
            context=self._context(invite),
            actor_id=actor_id,
        )
        return invite

    async def reissue(
        self,
        invite: Invite,
        wedding_id: UUID,
        max_uses: Any = None,
        expires_in_days: Any = None,
        actor_id: Optional[UUID] = None,
    ) -> Invite:
        """New token and a clean usage slate; recovers revoked or exhausted invites."""
        invite.assign_token()
        invite.status = InviteStatus.sent
        invite.used_at = None

        if self.capabilities.uses_count:
            invite.uses_count = 0
        if self.capabilities.max_uses:
            invite.max_uses = resolve_nullable_int(max_uses)
        if self.capabilities.revoked_at:
            invite.revoked_at = None
        if self.capabilities.revoked_reason:
            invite.revoked_reason = None

        invite.expires_at = resolve_expires_at(expires_in_days)
        invite = await self.uow.invites.update(invite)

        await self.audit.record(
            wedding_id=wedding_id,
            action=AuditAction.INVITE_REISSUED,
            context=self._context(invite),
            actor_id=actor_id,
        )
        return invite

    async def revoke(
        self,
        invite: Invite,
        wedding_id: UUID,
        reason: Optional[str] = None,
        actor_id: Optional[UUID] = None,
    ) -> Invite:
        if not self.capabilities.revoked_at:
            raise UnsupportedOperation(
                "REVOCATION_UNSUPPORTED",
                "Invite revocation is not available on this installation.",
            )

        invite.status = InviteStatus.revoked
        invite.revoked_at = utcnow()
        if self.capabilities.revoked_reason:
            invite.revoked_reason = reason

        invite = await self.uow.invites.update(invite)

        await self.audit.record(
            wedding_id=wedding_id,
            action=AuditAction.INVITE_REVOKED,
            context={
                "invite_id": invite.id,
                "household_id": invite.household_id,
                "guest_id": invite.guest_id,
                "reason": reason,
            },
            actor_id=actor_id,
        )
        return invite

    @staticmethod
    def _context(invite: Invite) -> dict:
        return {
            "invite_id": invite.id,
            "household_id": invite.household_id,
            "guest_id": invite.guest_id,
            "channel": invite.channel,
            "max_uses": invite.max_uses,
            "expires_at": invite.expires_at,
        }
