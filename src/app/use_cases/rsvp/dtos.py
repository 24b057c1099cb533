"""
RSVP Use Case DTOs (Data Transfer Objects)

Command and Response classes for RSVP submission.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, field_validator


# ============================================================================
# Command DTOs
# ============================================================================


class GuestData(BaseModel):
    """Submitter details posted with a public RSVP"""

    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    is_child: bool = False

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value


# ============================================================================
# Response DTOs
# ============================================================================


class RsvpResponse(BaseModel):
    """Stored RSVP after a submission"""

    id: str
    guest_id: str
    event_id: str
    status: str
    responses: Optional[Dict[str, Any]] = None
    responded_at: Optional[str] = None
    overall_rsvp_status: str
    created: bool


class PublicRsvpResponse(RsvpResponse):
    """Public submission adds how the submitter was admitted"""

    access_mode: str
    invite_id: Optional[str] = None
    invite_uses_count: Optional[int] = None
