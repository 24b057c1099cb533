"""
AuditLog Entity

Immutable log of every state-changing action on the guest engine.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class AuditLog(SQLModel, table=True):
    """
    AuditLog entity - append-only, keyed by wedding and optional actor.

    Business Rules:
    - Immutable (never updated or deleted)
    - Written in the same transaction as the mutation it describes
    - Sole source for invite/event timeline reconstruction; foreign ids
      (invite_id, event_id, guest_id) live in the context map
    """

    __tablename__ = "guest_audit_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    wedding_id: UUID = Field(nullable=False, index=True)
    actor_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g. "guest.invite.created"
    context: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_guest_audit_created_at", "created_at"),
        Index("idx_guest_audit_wedding_action", "wedding_id", "action"),
    )
