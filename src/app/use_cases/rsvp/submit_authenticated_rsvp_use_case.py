"""
Submit Authenticated RSVP Use Case

Operator-side RSVP entry for an existing guest.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from src.app.services.audit_log_writer import AuditAction, AuditLogWriter
from src.app.services.question_validator import QuestionValidator
from src.app.services.rsvp_writer import RsvpWriter
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RsvpStatus
from src.domain.errors import DomainError
from src.libs.result import Error, Result, Return

from .dtos import RsvpResponse


class SubmitAuthenticatedRsvpUseCase:
    """
    Business Rules:
    - guest and event must both belong to the caller's wedding
    - answers are validated against the event's questions before locking
    - the guest row is locked, the (guest, event) RSVP upserted and the
      guest's overall status recomputed in one transaction
    """

    def __init__(self, uow: UnitOfWork, validator: Optional[QuestionValidator] = None):
        self.uow = uow
        self.validator = validator or QuestionValidator()

    async def execute(
        self,
        wedding_id: UUID,
        event_id: UUID,
        guest_id: UUID,
        status: Optional[str],
        responses: Optional[Dict[str, Any]] = None,
        actor_id: Optional[UUID] = None,
    ) -> Result[RsvpResponse]:
        rsvp_status = RsvpStatus.normalize(status)

        async with self.uow:
            event = await self.uow.events.get_by_id(event_id)
            if event is None or event.wedding_id != wedding_id:
                return Return.err(Error("EVENT_NOT_FOUND", "Event not found"))

            guest = await self.uow.guests.get_by_id(guest_id)
            if guest is None or guest.wedding_id != wedding_id:
                return Return.err(Error("GUEST_NOT_FOUND", "Guest not found"))

            try:
                answers = self.validator.validate_for_event(event, responses)
            except DomainError as e:
                return Return.err(e.error)

            locked_guest = await self.uow.guests.get_by_id_for_update(guest.id)
            if locked_guest is None:
                return Return.err(Error("GUEST_NOT_FOUND", "Guest not found"))

            writer = RsvpWriter(self.uow)
            rsvp, created = await writer.upsert(
                locked_guest, event.id, rsvp_status, answers, updated_by=actor_id
            )
            overall = await writer.refresh_overall_status(locked_guest)

            await AuditLogWriter(self.uow).record(
                wedding_id=wedding_id,
                action=AuditAction.RSVP_AUTHENTICATED_SUBMITTED,
                context={
                    "guest_id": locked_guest.id,
                    "event_id": event.id,
                    "status": rsvp_status,
                    "has_responses": bool(answers),
                },
                actor_id=actor_id,
            )

            await self.uow.commit()

            return Return.ok(
                RsvpResponse(
                    id=str(rsvp.id),
                    guest_id=str(locked_guest.id),
                    event_id=str(event.id),
                    status=rsvp.status.value,
                    responses=rsvp.responses,
                    responded_at=rsvp.responded_at.isoformat() if rsvp.responded_at else None,
                    overall_rsvp_status=overall.value,
                    created=created,
                )
            )
