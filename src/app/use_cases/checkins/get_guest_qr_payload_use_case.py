from uuid import UUID

from src.app.services.checkin_qr_codec import CheckinQrCodec
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return

from .dtos import QrPayloadResponse


class GetGuestQrPayloadUseCase:
    """Issues the encrypted check-in QR content for one guest of the wedding."""

    def __init__(self, uow: UnitOfWork, codec: CheckinQrCodec):
        self.uow = uow
        self.codec = codec

    async def execute(self, wedding_id: UUID, guest_id: UUID) -> Result[QrPayloadResponse]:
        async with self.uow:
            guest = await self.uow.guests.get_by_id(guest_id)
            if guest is None or guest.wedding_id != wedding_id:
                return Return.err(Error("GUEST_NOT_FOUND", "Guest not found"))

            issued = self.codec.issue(guest)
            return Return.ok(
                QrPayloadResponse(
                    guest_id=str(guest.id),
                    token=issued["token"],
                    qr_content=issued["qr_content"],
                )
            )
