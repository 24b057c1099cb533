"""
Check-in Use Cases

Arrival registration (manual, QR scan), QR issuance and listing.
"""

from .dtos import CheckinListResponse, CheckinResponse, QrPayloadResponse
from .get_guest_qr_payload_use_case import GetGuestQrPayloadUseCase
from .list_checkins_use_case import ListCheckinsUseCase
from .record_checkin_use_case import RecordCheckinUseCase
from .scan_checkin_use_case import ScanCheckinUseCase

__all__ = [
    "RecordCheckinUseCase",
    "ScanCheckinUseCase",
    "GetGuestQrPayloadUseCase",
    "ListCheckinsUseCase",
    "CheckinResponse",
    "CheckinListResponse",
    "QrPayloadResponse",
]
