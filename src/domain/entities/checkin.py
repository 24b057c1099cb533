"""
Checkin Entity

One recorded physical/QR arrival.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import CheckinMethod


class Checkin(SQLModel, table=True):
    """
    Checkin entity - at most one row per (guest, event-or-null).

    Repeat scans are detected under the guest row lock and short-circuited;
    they produce an audit entry but never a second row. The partial unique
    indexes enforce the same rule in the database.
    """

    __tablename__ = "guest_checkins"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    guest_id: UUID = Field(foreign_key="guests.id", nullable=False)
    event_id: Optional[UUID] = Field(default=None, foreign_key="guest_events.id")
    operator_id: Optional[UUID] = Field(default=None)

    method: CheckinMethod = Field(default=CheckinMethod.qr)
    device_id: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None)

    checked_in_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_checkin_event_time", "event_id", "checked_in_at"),
        Index("idx_checkin_guest_time", "guest_id", "checked_in_at"),
        Index(
            "uq_checkin_guest_event",
            "guest_id",
            "event_id",
            unique=True,
            sqlite_where=text("event_id IS NOT NULL"),
            postgresql_where=text("event_id IS NOT NULL"),
        ),
        Index(
            "uq_checkin_guest_without_event",
            "guest_id",
            unique=True,
            sqlite_where=text("event_id IS NULL"),
            postgresql_where=text("event_id IS NULL"),
        ),
    )
