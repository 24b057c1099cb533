from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Guest, Rsvp, RsvpStatus


class RsvpWriter:
    """
    Upserts the single RSVP row of a (guest, event) pair and refreshes the
    guest's overall status.

    The caller must hold the guest row lock; that lock serializes concurrent
    submissions for the same guest so the lookup-then-insert cannot race.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def upsert(
        self,
        guest: Guest,
        event_id: UUID,
        status: RsvpStatus,
        responses: Optional[Dict[str, Any]],
        updated_by: Optional[UUID] = None,
        existing: Optional[Rsvp] = None,
    ) -> Tuple[Rsvp, bool]:
        """Returns the stored RSVP and whether it was newly created."""
        rsvp = existing or await self.uow.rsvps.get_by_guest_and_event(guest.id, event_id)
        answers = responses or None

        if rsvp is None:
            rsvp = Rsvp(
                guest_id=guest.id,
                event_id=event_id,
                status=status,
                responses=answers,
                responded_at=utcnow(),
                updated_by=updated_by,
            )
            return await self.uow.rsvps.create(rsvp), True

        rsvp.status = status
        rsvp.responses = answers
        rsvp.responded_at = utcnow()
        rsvp.updated_by = updated_by
        return await self.uow.rsvps.update(rsvp), False

    async def refresh_overall_status(self, guest: Guest) -> RsvpStatus:
        statuses = await self.uow.rsvps.list_statuses_for_guest(guest.id)
        overall = Guest.aggregate_rsvp_status(statuses)
        if guest.overall_rsvp_status != overall:
            guest.overall_rsvp_status = overall
            await self.uow.guests.update(guest)
        return overall
