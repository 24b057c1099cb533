"""
Check-in Recorder

Registers a guest's arrival at most once per (guest, event-or-null) pair.
A repeat attempt is a successful no-op flagged ``duplicate``; it writes an
audit entry but never a second row.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from src.app.services.audit_log_writer import AuditAction, AuditLogWriter
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Checkin, CheckinMethod, Event, Guest
from src.domain.errors import DomainError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class CheckinOutcome:
    created: bool
    duplicate: bool
    checkin: Checkin
    guest: Guest
    event: Optional[Event]


def parse_method(method: Optional[str]) -> CheckinMethod:
    try:
        return CheckinMethod(str(method or "").strip().lower())
    except ValueError:
        raise ValidationError("INVALID_METHOD", "Invalid check-in method.")


class CheckinRecorder:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def record(
        self,
        wedding_id: UUID,
        guest_id: UUID,
        event_id: Optional[UUID] = None,
        method: Optional[str] = CheckinMethod.qr.value,
        device_id: Optional[str] = None,
        notes: Optional[str] = None,
        operator_id: Optional[UUID] = None,
    ) -> CheckinOutcome:
        """
        Must run inside the caller's transaction. The guest row lock makes
        the duplicate lookup and the insert atomic; the unique indexes on
        (guest, event) catch any insert that still slips past it.
        """
        checkin_method = parse_method(method)

        guest = await self.uow.guests.get_by_id_for_update(guest_id)
        if guest is None:
            raise DomainError("GUEST_NOT_FOUND", "Guest not found.", 404)
        if guest.wedding_id != wedding_id:
            raise ValidationError("TENANT_MISMATCH", "Guest is not valid for this wedding.")

        event = await self.resolve_event(event_id, wedding_id)

        audit = AuditLogWriter(self.uow)
        existing = await self.uow.checkins.get_latest_for_guest(
            guest.id, event.id if event else None
        )
        if existing is not None:
            return await self._ignore_duplicate(
                existing, guest, event, checkin_method, wedding_id, operator_id
            )

        if event is not None and not event.is_open_at(utcnow()):
            raise ValidationError("EVENT_INACTIVE", "Event is not active for check-in.")

        checkin = await self.uow.checkins.create(
            Checkin(
                guest_id=guest.id,
                event_id=event.id if event else None,
                operator_id=operator_id,
                method=checkin_method,
                device_id=device_id,
                notes=notes,
                checked_in_at=utcnow(),
            )
        )
        if checkin is None:
            # A concurrent request inserted the same pair first
            existing = await self.uow.checkins.get_latest_for_guest(
                guest.id, event.id if event else None
            )
            if existing is None:
                raise DomainError("CHECKIN_CONFLICT", "Check-in could not be recorded.", 409)
            return await self._ignore_duplicate(
                existing, guest, event, checkin_method, wedding_id, operator_id
            )

        await audit.record(
            wedding_id=wedding_id,
            action=AuditAction.CHECKIN_RECORDED,
            context={
                "checkin_id": checkin.id,
                "guest_id": guest.id,
                "event_id": event.id if event else None,
                "method": checkin_method,
                "device_id": device_id,
            },
            actor_id=operator_id,
        )
        return CheckinOutcome(True, False, checkin, guest, event)

    async def _ignore_duplicate(
        self,
        existing: Checkin,
        guest: Guest,
        event: Optional[Event],
        checkin_method: CheckinMethod,
        wedding_id: UUID,
        operator_id: Optional[UUID],
    ) -> CheckinOutcome:
        logger.info(
            f"Duplicate check-in ignored: guest={guest.id} event={event.id if event else None}"
        )
        await AuditLogWriter(self.uow).record(
            wedding_id=wedding_id,
            action=AuditAction.CHECKIN_DUPLICATE_IGNORED,
            context={
                "checkin_id": existing.id,
                "guest_id": guest.id,
                "event_id": event.id if event else None,
                "method": checkin_method,
            },
            actor_id=operator_id,
        )
        return CheckinOutcome(False, True, existing, guest, event)

    async def resolve_event(self, event_id: Optional[UUID], wedding_id: UUID) -> Optional[Event]:
        if event_id is None:
            return None

        event = await self.uow.events.get_by_id(event_id)
        if event is None:
            raise DomainError("EVENT_NOT_FOUND", "Event not found.", 404)
        if event.wedding_id != wedding_id:
            raise ValidationError("TENANT_MISMATCH", "Event is not valid for this wedding.")
        return event
