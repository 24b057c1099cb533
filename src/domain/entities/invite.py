"""
Invite Entity

Bearer-token credential granting a household (or one pinned guest) access
to submit RSVPs.
"""

import hashlib
import secrets
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Integer, text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import InviteChannel, InviteStatus

TOKEN_BYTES = 32


class Invite(SQLModel, table=True):
    """
    Invite entity - owns the uses/expiry/revocation state machine.

    Business Rules:
    - uses_count never decreases except through reissue
    - once revoked_at is set the invite is unusable until reissued
    - usable iff not revoked, not expired and uses remaining
    - token_hash (SHA-256 hex) is the lookup key; raw token kept for links
    """

    __tablename__ = "guest_invites"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    household_id: UUID = Field(foreign_key="guest_households.id", nullable=False, index=True)
    guest_id: Optional[UUID] = Field(default=None, foreign_key="guests.id")
    created_by: Optional[UUID] = Field(default=None)

    token: str = Field(unique=True, max_length=64)
    token_hash: Optional[str] = Field(default=None, unique=True, index=True, max_length=64)
    channel: InviteChannel = Field(default=InviteChannel.email)
    status: InviteStatus = Field(default=InviteStatus.sent)

    # Usage counters
    uses_count: int = Field(
        default=0, sa_column=Column(Integer, nullable=False, server_default=text("0"))
    )
    max_uses: Optional[int] = Field(default=None)

    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_reason: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_invite_household_status", "household_id", "status"),
        Index("idx_invite_status_uses", "status", "uses_count"),
    )

    @staticmethod
    def generate_token() -> str:
        return secrets.token_urlsafe(TOKEN_BYTES)

    @staticmethod
    def hash_token(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def assign_token(self, token: Optional[str] = None) -> str:
        self.token = token or self.generate_token()
        self.token_hash = self.hash_token(self.token)
        return self.token

    def is_revoked(self) -> bool:
        return self.revoked_at is not None or self.status == InviteStatus.revoked

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or utcnow())

    def is_exhausted(self) -> bool:
        return self.max_uses is not None and (self.uses_count or 0) >= self.max_uses

    def is_usable(self, now: Optional[datetime] = None) -> bool:
        return not (self.is_revoked() or self.is_expired(now) or self.is_exhausted())

    def mark_used(self, now: Optional[datetime] = None) -> None:
        self.uses_count = (self.uses_count or 0) + 1
        self.used_at = now or utcnow()
