"""
Scan Check-in Use Case

Resolves a scanned QR code to a guest and records a QR check-in.
"""

from typing import Optional
from uuid import UUID

from src.app.services.checkin_qr_codec import CheckinQrCodec
from src.app.services.checkin_recorder import CheckinRecorder
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CheckinMethod
from src.domain.errors import DomainError
from src.libs.result import Result, Return

from .dtos import CheckinResponse


class ScanCheckinUseCase:
    def __init__(self, uow: UnitOfWork, codec: CheckinQrCodec):
        self.uow = uow
        self.codec = codec

    async def execute(
        self,
        wedding_id: UUID,
        code: str,
        event_id: Optional[UUID] = None,
        device_id: Optional[str] = None,
        notes: Optional[str] = None,
        operator_id: Optional[UUID] = None,
    ) -> Result[CheckinResponse]:
        try:
            guest_id = self.codec.resolve(code, wedding_id)
        except DomainError as e:
            return Return.err(e.error)

        async with self.uow:
            try:
                outcome = await CheckinRecorder(self.uow).record(
                    wedding_id,
                    guest_id,
                    event_id=event_id,
                    method=CheckinMethod.qr.value,
                    device_id=device_id,
                    notes=notes,
                    operator_id=operator_id,
                )
            except DomainError as e:
                return Return.err(e.error)

            await self.uow.commit()

            return Return.ok(CheckinResponse.from_outcome(outcome))
