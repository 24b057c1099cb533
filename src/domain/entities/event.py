"""
Event Entity

An RSVP event (ceremony, reception, ...) of a wedding.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Event(SQLModel, table=True):
    """
    Event entity - gates whether RSVP and check-in are accepted.

    Business Rules:
    - questions is an ordered list of {key?, label, type, required, options}
    - rules may carry an "access" block overriding the wedding's RSVP policy
    - accepts submissions only when active and inside the activation window
    """

    __tablename__ = "guest_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    wedding_id: UUID = Field(nullable=False, index=True)
    created_by: Optional[UUID] = Field(default=None)

    name: str = Field(max_length=255)
    slug: str = Field(max_length=255)
    event_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    is_active: bool = Field(default=True)

    questions: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSON))
    rules: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    # Activation window, either bound optional
    active_from: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    active_until: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_event_wedding_slug", "wedding_id", "slug"),)

    def is_open_at(self, now: datetime) -> bool:
        if not self.is_active:
            return False
        if self.active_from is not None and now < self.active_from:
            return False
        if self.active_until is not None and now > self.active_until:
            return False
        return True

    def questions_count(self) -> int:
        return len(self.questions) if isinstance(self.questions, list) else 0
