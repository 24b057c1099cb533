"""
Message Entities

Outbound delivery attempts and their per-attempt status log.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import InviteChannel, MessageStatus


class Message(SQLModel, table=True):
    """
    Message entity - one outbound delivery request.

    payload embeds the originating invite_id, link and recipient.
    """

    __tablename__ = "guest_messages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    wedding_id: UUID = Field(nullable=False, index=True)
    created_by: Optional[UUID] = Field(default=None)

    channel: InviteChannel = Field(default=InviteChannel.email)
    subject: Optional[str] = Field(default=None, max_length=255)
    body: Optional[str] = Field(default=None)
    payload: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    status: MessageStatus = Field(default=MessageStatus.draft)
    sent_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_message_wedding_channel", "wedding_id", "channel"),
        Index("idx_message_wedding_status", "wedding_id", "status"),
    )

    @property
    def invite_id(self) -> Optional[str]:
        invite_id = (self.payload or {}).get("invite_id")
        return invite_id if isinstance(invite_id, str) and invite_id else None


class MessageLog(SQLModel, table=True):
    """MessageLog entity - status transitions of one message"""

    __tablename__ = "guest_message_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    message_id: UUID = Field(foreign_key="guest_messages.id", nullable=False, index=True)
    guest_id: Optional[UUID] = Field(default=None)

    status: MessageStatus = Field(default=MessageStatus.sending)
    occurred_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    details: Optional[dict] = Field(default=None, sa_column=Column(JSON))
