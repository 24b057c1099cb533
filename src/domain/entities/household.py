"""
Household Entity

A named group of guests belonging to one wedding.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Household(SQLModel, table=True):
    """
    Household entity - named group of related guests.

    Created by an operator, or implicitly when an open public RSVP
    materializes a brand-new guest.
    """

    __tablename__ = "guest_households"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    wedding_id: UUID = Field(nullable=False, index=True)
    created_by: Optional[UUID] = Field(default=None)

    name: str = Field(max_length=255)
    code: Optional[str] = Field(default=None, max_length=50)
    side: Optional[str] = Field(default=None, max_length=20)
    category: Optional[str] = Field(default=None, max_length=50)

    # Seating quota
    quota_adults: Optional[int] = Field(default=None)
    quota_children: Optional[int] = Field(default=None)
    plus_one_allowed: bool = Field(default=False)

    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_household_wedding_name", "wedding_id", "name"),)
