"""
Invite Validation Service

Resolves bearer tokens to invites of one wedding and asserts usability.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Invite
from src.domain.errors import RsvpSubmissionError


class InviteValidationService:
    """
    Token lookup and usability checks shared by RSVP submission.

    resolve_for_wedding is an optimistic pre-check; lock_and_validate_for_wedding
    must be called inside the submitting transaction before the invite is used.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def resolve_for_wedding(
        self, token: Optional[str], wedding_id: UUID
    ) -> Optional[Invite]:
        if not token:
            return None

        invite = await self.uow.invites.get_by_token(token)
        if invite is None:
            raise RsvpSubmissionError("INVITE_NOT_FOUND", "Invalid invite.", 404)

        await self.assert_belongs_to_wedding(invite, wedding_id)
        self.assert_usable(invite)
        return invite

    async def lock_and_validate_for_wedding(
        self, invite: Invite, wedding_id: UUID
    ) -> Invite:
        locked = await self.uow.invites.get_by_id_for_update(invite.id)
        if locked is None:
            raise RsvpSubmissionError("INVITE_NOT_FOUND", "Invalid invite.", 404)

        await self.assert_belongs_to_wedding(locked, wedding_id)
        self.assert_usable(locked)
        return locked

    async def assert_belongs_to_wedding(self, invite: Invite, wedding_id: UUID) -> None:
        if invite.household_id:
            household = await self.uow.households.get_by_id(invite.household_id)
            if household is None:
                raise RsvpSubmissionError("INVITE_NOT_FOUND", "Invalid invite.", 404)
            if household.wedding_id != wedding_id:
                raise RsvpSubmissionError(
                    "TENANT_MISMATCH", "Invite does not belong to this wedding.", 422
                )
            return

        if invite.guest_id:
            guest = await self.uow.guests.get_by_id(invite.guest_id)
            if guest is None:
                raise RsvpSubmissionError("INVITE_NOT_FOUND", "Invalid invite.", 404)
            if guest.wedding_id != wedding_id:
                raise RsvpSubmissionError(
                    "TENANT_MISMATCH", "Invite does not belong to this wedding.", 422
                )

    @staticmethod
    def assert_usable(invite: Invite, now: Optional[datetime] = None) -> None:
        now = now or utcnow()
        if invite.revoked_at is not None:
            raise RsvpSubmissionError("INVITE_REVOKED", "Invite has been revoked.", 410)
        if invite.is_expired(now):
            raise RsvpSubmissionError("INVITE_EXPIRED", "Invite has expired.", 410)
        if invite.is_exhausted():
            raise RsvpSubmissionError(
                "INVITE_EXHAUSTED", "Invite has reached its usage limit.", 409
            )
