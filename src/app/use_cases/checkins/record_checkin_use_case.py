"""
Record Check-in Use Case

Manual or QR arrival registration for a known guest id.
"""

from typing import Optional
from uuid import UUID

from src.app.services.checkin_recorder import CheckinRecorder
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import DomainError
from src.libs.result import Result, Return

from .dtos import CheckinResponse


class RecordCheckinUseCase:
    """
    Idempotent per (guest, event-or-null): the first call creates the row,
    later calls return it with duplicate=True.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        wedding_id: UUID,
        guest_id: UUID,
        event_id: Optional[UUID] = None,
        method: Optional[str] = "manual",
        device_id: Optional[str] = None,
        notes: Optional[str] = None,
        operator_id: Optional[UUID] = None,
    ) -> Result[CheckinResponse]:
        async with self.uow:
            try:
                outcome = await CheckinRecorder(self.uow).record(
                    wedding_id,
                    guest_id,
                    event_id=event_id,
                    method=method,
                    device_id=device_id,
                    notes=notes,
                    operator_id=operator_id,
                )
            except DomainError as e:
                return Return.err(e.error)

            # Duplicates commit too: their audit entry must persist
            await self.uow.commit()

            return Return.ok(CheckinResponse.from_outcome(outcome))
