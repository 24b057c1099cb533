"""
Invite Use Case DTOs (Data Transfer Objects)

Response classes for the invite lifecycle.
"""

from typing import Optional

from pydantic import BaseModel

from src.domain.entities import Invite


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


class DeliveryInfo(BaseModel):
    """Outcome of the delivery attempt made after create/reissue"""

    ok: bool
    message: str


class InviteResponse(BaseModel):
    """Invite state as seen by operators"""

    id: str
    household_id: str
    guest_id: Optional[str] = None
    token: str
    channel: str
    status: str
    uses_count: int
    max_uses: Optional[int] = None
    expires_at: Optional[str] = None
    used_at: Optional[str] = None
    revoked_at: Optional[str] = None
    revoked_reason: Optional[str] = None
    delivery: Optional[DeliveryInfo] = None

    @classmethod
    def from_entity(
        cls, invite: Invite, delivery: Optional[DeliveryInfo] = None
    ) -> "InviteResponse":
        return cls(
            id=str(invite.id),
            household_id=str(invite.household_id),
            guest_id=str(invite.guest_id) if invite.guest_id else None,
            token=invite.token,
            channel=getattr(invite.channel, "value", invite.channel),
            status=getattr(invite.status, "value", invite.status),
            uses_count=invite.uses_count or 0,
            max_uses=invite.max_uses,
            expires_at=_iso(invite.expires_at),
            used_at=_iso(invite.used_at),
            revoked_at=_iso(invite.revoked_at),
            revoked_reason=invite.revoked_reason,
            delivery=delivery,
        )


class BulkReissueResponse(BaseModel):
    """Counts for a bulk reissue"""

    total: int = 0
    reissued: int = 0
    sent: int = 0
    failed_to_send: int = 0
    failed: int = 0


class BulkRevokeResponse(BaseModel):
    """Counts for a bulk revoke"""

    total: int = 0
    revoked: int = 0
    already_revoked: int = 0
    failed: int = 0
