"""
Guest Engine Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    CheckinMethod,
    InviteChannel,
    InviteStatus,
    MessageStatus,
    RsvpAccessMode,
    RsvpStatus,
)

# Export all entities
from .household import Household
from .guest import Guest
from .event import Event
from .rsvp import Rsvp
from .invite import Invite
from .checkin import Checkin
from .audit_log import AuditLog
from .message import Message, MessageLog

__all__ = [
    # Enums
    "CheckinMethod",
    "InviteChannel",
    "InviteStatus",
    "MessageStatus",
    "RsvpAccessMode",
    "RsvpStatus",
    # Entities
    "Household",
    "Guest",
    "Event",
    "Rsvp",
    "Invite",
    "Checkin",
    "AuditLog",
    "Message",
    "MessageLog",
]
