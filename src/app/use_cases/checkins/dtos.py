"""
Check-in Use Case DTOs (Data Transfer Objects)
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from src.app.services.checkin_recorder import CheckinOutcome


class CheckinInfo(BaseModel):
    id: str
    guest_id: str
    event_id: Optional[str] = None
    operator_id: Optional[str] = None
    method: str
    device_id: Optional[str] = None
    notes: Optional[str] = None
    checked_in_at: str


class CheckinGuestInfo(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class CheckinEventInfo(BaseModel):
    id: str
    name: str


class CheckinResponse(BaseModel):
    """Result of a check-in attempt; duplicate=True is a successful no-op"""

    created: bool
    duplicate: bool
    checkin: CheckinInfo
    guest: CheckinGuestInfo
    event: Optional[CheckinEventInfo] = None

    @classmethod
    def from_outcome(cls, outcome: CheckinOutcome) -> "CheckinResponse":
        checkin = outcome.checkin
        return cls(
            created=outcome.created,
            duplicate=outcome.duplicate,
            checkin=CheckinInfo(
                id=str(checkin.id),
                guest_id=str(checkin.guest_id),
                event_id=str(checkin.event_id) if checkin.event_id else None,
                operator_id=str(checkin.operator_id) if checkin.operator_id else None,
                method=getattr(checkin.method, "value", checkin.method),
                device_id=checkin.device_id,
                notes=checkin.notes,
                checked_in_at=checkin.checked_in_at.isoformat(),
            ),
            guest=CheckinGuestInfo(
                id=str(outcome.guest.id),
                name=outcome.guest.name,
                email=outcome.guest.email,
                phone=outcome.guest.phone,
            ),
            event=(
                CheckinEventInfo(id=str(outcome.event.id), name=outcome.event.name)
                if outcome.event
                else None
            ),
        )


class QrPayloadResponse(BaseModel):
    guest_id: str
    token: str
    qr_content: str


class CheckinListResponse(BaseModel):
    items: List[Dict[str, Any]]
    summary: Dict[str, Any]
