"""
Submit Public RSVP Use Case

Guest-facing RSVP entry. The submitter may present an invite token, or be
admitted by the event's access rules (restricted lookup or fully open).
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from src.app.services.audit_log_writer import AuditAction, AuditLogWriter
from src.app.services.invite_validation import InviteValidationService
from src.app.services.question_validator import QuestionValidator
from src.app.services.rsvp_access_rules import RsvpAccessRules
from src.app.services.rsvp_writer import RsvpWriter
from src.app.services.schema_capabilities import SchemaCapabilities
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Guest, Household, Invite, RsvpAccessMode, RsvpStatus
from src.domain.errors import DomainError, RsvpSubmissionError
from src.libs.result import Error, Result, Return

from .dtos import GuestData, PublicRsvpResponse

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "token"
CREATE_IN_INVITE_HOUSEHOLD = "invite_household"
CREATE_OPEN = "open"


class SubmitPublicRsvpUseCase:
    """
    Use case for public RSVP submission.

    Identity precedence:
    1. invite pinned to a guest -> that guest
    2. invite pinned to a household only -> new guest in that household
    3. no invite, restricted -> existing guest matched by email/phone (403 if none)
    4. no invite, open -> new household and guest

    Locking: guest row first, then the invite row. The invite read before
    the transaction is only a pre-check; usability is re-validated under the
    invite lock so racing submissions cannot exceed max_uses.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        default_access: str = RsvpAccessMode.open.value,
        capabilities: Optional[SchemaCapabilities] = None,
        validator: Optional[QuestionValidator] = None,
    ):
        self.uow = uow
        self.default_access = default_access
        self.capabilities = capabilities or SchemaCapabilities.full()
        self.validator = validator or QuestionValidator()

    async def execute(
        self,
        event_id: UUID,
        status: Optional[str],
        guest: Optional[GuestData] = None,
        token: Optional[str] = None,
        household_name: Optional[str] = None,
        responses: Optional[Dict[str, Any]] = None,
    ) -> Result[PublicRsvpResponse]:
        async with self.uow:
            try:
                response = await self._submit(
                    event_id,
                    RsvpStatus.normalize(status),
                    guest or GuestData(),
                    token,
                    household_name,
                    responses,
                )
            except DomainError as e:
                logger.info(f"Public RSVP rejected for event {event_id}: {e.code}")
                return Return.err(e.error)

            await self.uow.commit()
            return Return.ok(response)

    async def _submit(
        self,
        event_id: UUID,
        status: RsvpStatus,
        guest_data: GuestData,
        token: Optional[str],
        household_name: Optional[str],
        responses: Optional[Dict[str, Any]],
    ) -> PublicRsvpResponse:
        event = await self.uow.events.get_by_id(event_id)
        if event is None:
            raise RsvpSubmissionError("EVENT_NOT_FOUND", "Event not found.", 404)
        if not event.is_open_at(utcnow()):
            raise RsvpSubmissionError(
                "EVENT_INACTIVE", "This event is not accepting RSVPs.", 422
            )

        wedding_id = event.wedding_id
        answers = self.validator.validate_for_event(event, responses)
        rules = RsvpAccessRules.for_event(event, self.default_access)
        guest_data = self._apply_guest_rules(guest_data, rules)

        invites = InviteValidationService(self.uow)
        invite = await invites.resolve_for_wedding(token, wedding_id)

        if rules.require_invite_token and invite is None:
            raise RsvpSubmissionError(
                "INVITE_REQUIRED",
                "This RSVP requires an invite link. Use the link you received.",
                422,
            )

        if invite is not None:
            access_mode = ACCESS_TOKEN
        elif rules.effective_mode == RsvpAccessMode.restricted:
            access_mode = RsvpAccessMode.restricted.value
        else:
            access_mode = RsvpAccessMode.open.value

        submitter: Optional[Guest] = None
        create_mode: Optional[str] = None

        if invite is not None and invite.guest_id:
            submitter = await self.uow.guests.get_by_id(invite.guest_id)
            if submitter is None:
                raise RsvpSubmissionError("INVITE_NOT_FOUND", "Invalid invite.", 404)
            if submitter.wedding_id != wedding_id:
                raise RsvpSubmissionError(
                    "TENANT_MISMATCH", "Guest does not belong to this event.", 422
                )
        elif invite is not None and invite.household_id:
            create_mode = CREATE_IN_INVITE_HOUSEHOLD
        elif rules.effective_mode == RsvpAccessMode.restricted:
            submitter = await self._resolve_restricted_guest(guest_data, wedding_id)
        else:
            create_mode = CREATE_OPEN

        if create_mode == CREATE_IN_INVITE_HOUSEHOLD:
            household = await self.uow.households.get_by_id(invite.household_id)
            if household is None:
                raise RsvpSubmissionError("INVITE_NOT_FOUND", "Invalid invite.", 404)
            submitter = await self._create_guest(wedding_id, household.id, guest_data)
        elif create_mode == CREATE_OPEN:
            household = await self.uow.households.create(
                Household(
                    wedding_id=wedding_id,
                    name=(household_name or "").strip() or guest_data.name,
                )
            )
            submitter = await self._create_guest(wedding_id, household.id, guest_data)

        locked_guest = await self.uow.guests.get_by_id_for_update(submitter.id)
        if locked_guest is None:
            raise RsvpSubmissionError(
                "GUEST_NOT_FOUND", "Guest does not belong to this event.", 422
            )

        existing = await self.uow.rsvps.get_by_guest_and_event(locked_guest.id, event.id)
        if existing is not None and not rules.allow_response_update:
            raise RsvpSubmissionError(
                "RSVP_ALREADY_ANSWERED",
                "This invite has already been answered and cannot be changed.",
                409,
            )

        writer = RsvpWriter(self.uow)
        rsvp, created = await writer.upsert(
            locked_guest, event.id, status, answers, existing=existing
        )
        overall = await writer.refresh_overall_status(locked_guest)

        audit = AuditLogWriter(self.uow)
        locked_invite: Optional[Invite] = None
        if invite is not None:
            locked_invite = await invites.lock_and_validate_for_wedding(invite, wedding_id)
            locked_invite.mark_used()
            locked_invite = await self.uow.invites.update(locked_invite)

            await audit.record(
                wedding_id=wedding_id,
                action=AuditAction.INVITE_USED,
                context={
                    "invite_id": locked_invite.id,
                    "guest_id": locked_guest.id,
                    "event_id": event.id,
                    "uses_count": locked_invite.uses_count,
                    "max_uses": locked_invite.max_uses,
                },
            )

        await audit.record(
            wedding_id=wedding_id,
            action=AuditAction.RSVP_PUBLIC_SUBMITTED,
            context={
                "guest_id": locked_guest.id,
                "event_id": event.id,
                "status": status,
                "access_mode": access_mode,
                "invite_id": locked_invite.id if locked_invite else None,
                "has_responses": bool(answers),
            },
        )

        return PublicRsvpResponse(
            id=str(rsvp.id),
            guest_id=str(locked_guest.id),
            event_id=str(event.id),
            status=rsvp.status.value,
            responses=rsvp.responses,
            responded_at=rsvp.responded_at.isoformat() if rsvp.responded_at else None,
            overall_rsvp_status=overall.value,
            created=created,
            access_mode=access_mode,
            invite_id=str(locked_invite.id) if locked_invite else None,
            invite_uses_count=locked_invite.uses_count if locked_invite else None,
        )

    @staticmethod
    def _apply_guest_rules(guest_data: GuestData, rules: RsvpAccessRules) -> GuestData:
        name = (guest_data.name or "").strip()
        email = Guest.normalize_email(guest_data.email)
        phone = Guest.normalize_phone(guest_data.phone)

        if rules.collect_name and not name:
            raise RsvpSubmissionError("INVALID_GUEST_DATA", "Please enter your name.", 422)
        if not name:
            name = email or phone or "Guest"
        if rules.require_email and not email:
            raise RsvpSubmissionError(
                "INVALID_GUEST_DATA", "An email address is required to RSVP.", 422
            )
        if rules.require_phone and not phone:
            raise RsvpSubmissionError(
                "INVALID_GUEST_DATA", "A phone number is required to RSVP.", 422
            )

        return guest_data.model_copy(update={"name": name})

    async def _resolve_restricted_guest(self, guest_data: GuestData, wedding_id: UUID) -> Guest:
        email = Guest.normalize_email(guest_data.email)
        phone = Guest.normalize_phone(guest_data.phone)
        if not email and not phone:
            raise RsvpSubmissionError(
                "INVALID_GUEST_DATA",
                "Enter an email or phone number to validate your RSVP.",
                422,
            )

        guest = await self.uow.guests.find_by_contact(
            wedding_id,
            email,
            phone,
            raw_phone=guest_data.phone,
            use_normalized=self.capabilities.normalized_contacts,
        )
        if guest is None:
            raise RsvpSubmissionError(
                "RSVP_RESTRICTED",
                "RSVP is restricted. Only registered guests can respond.",
                403,
            )
        return guest

    async def _create_guest(
        self, wedding_id: UUID, household_id: UUID, guest_data: GuestData
    ) -> Guest:
        guest = Guest(
            wedding_id=wedding_id,
            household_id=household_id,
            name=guest_data.name,
            is_child=guest_data.is_child,
        )
        guest.set_contacts(guest_data.email, guest_data.phone)
        return await self.uow.guests.create(guest)
