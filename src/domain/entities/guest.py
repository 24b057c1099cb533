"""
Guest Entity

A person invited to a wedding, optionally grouped in a household.
"""

import re
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import RSVP_PRECEDENCE, RsvpStatus

_NON_DIGITS = re.compile(r"\D+")


class Guest(SQLModel, table=True):
    """
    Guest entity - belongs to exactly one wedding.

    Business Rules:
    - normalized_email / normalized_phone are kept in sync with the raw
      contact fields and are what restricted RSVP lookups match against
    - overall_rsvp_status is derived from all of the guest's RSVPs
      (confirmed > maybe > declined > no_response)
    """

    __tablename__ = "guests"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    wedding_id: UUID = Field(nullable=False, index=True)
    household_id: Optional[UUID] = Field(
        default=None, foreign_key="guest_households.id", index=True
    )

    name: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    normalized_email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30)
    normalized_phone: Optional[str] = Field(default=None, max_length=30)

    is_child: bool = Field(default=False)
    overall_rsvp_status: RsvpStatus = Field(default=RsvpStatus.no_response)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_guest_wedding_normalized_email", "wedding_id", "normalized_email"),
        Index("idx_guest_wedding_normalized_phone", "wedding_id", "normalized_phone"),
        Index("idx_guest_wedding_overall_status", "wedding_id", "overall_rsvp_status"),
    )

    @staticmethod
    def normalize_email(value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        normalized = str(value).strip().lower()
        return normalized or None

    @staticmethod
    def normalize_phone(value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        digits = _NON_DIGITS.sub("", str(value))
        return digits or None

    def set_contacts(self, email: Optional[str], phone: Optional[str]) -> None:
        self.email = email or None
        self.phone = phone or None
        self.normalized_email = self.normalize_email(email)
        self.normalized_phone = self.normalize_phone(phone)

    @staticmethod
    def aggregate_rsvp_status(statuses: Iterable[RsvpStatus]) -> RsvpStatus:
        present = {RsvpStatus(s) for s in statuses}
        for status in RSVP_PRECEDENCE:
            if status in present:
                return status
        return RsvpStatus.no_response
