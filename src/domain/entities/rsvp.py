"""
RSVP Entity

One answer per (guest, event).
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, SQLModel, UniqueConstraint

from src.domain.base import utcnow

from .enums import RsvpStatus


class Rsvp(SQLModel, table=True):
    """
    RSVP entity - upserted by the submission pipeline, never deleted.

    The (guest_id, event_id) pair is unique; resubmissions overwrite status,
    responses and responded_at in place.
    """

    __tablename__ = "guest_rsvps"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    guest_id: UUID = Field(foreign_key="guests.id", nullable=False, index=True)
    event_id: UUID = Field(foreign_key="guest_events.id", nullable=False, index=True)

    status: RsvpStatus = Field(default=RsvpStatus.no_response)
    responses: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    responded_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    updated_by: Optional[UUID] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("guest_id", "event_id", name="uq_rsvp_guest_event"),
    )
