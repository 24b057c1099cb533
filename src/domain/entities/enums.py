"""
Guest Engine Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum
from typing import Optional


class RsvpStatus(str, Enum):
    """Per-event RSVP answer"""

    confirmed = "confirmed"
    declined = "declined"
    maybe = "maybe"
    no_response = "no_response"

    @classmethod
    def normalize(cls, value: Optional[str]) -> "RsvpStatus":
        """Map free-form input (including Portuguese aliases) to a status."""
        normalized = str(value or "").strip().lower()
        return _RSVP_ALIASES.get(normalized, cls.no_response)


_RSVP_ALIASES = {
    "confirmed": RsvpStatus.confirmed,
    "confirmado": RsvpStatus.confirmed,
    "declined": RsvpStatus.declined,
    "recusado": RsvpStatus.declined,
    "maybe": RsvpStatus.maybe,
    "talvez": RsvpStatus.maybe,
    "pending": RsvpStatus.no_response,
    "pendente": RsvpStatus.no_response,
    "no_response": RsvpStatus.no_response,
    "sem_resposta": RsvpStatus.no_response,
    "sem resposta": RsvpStatus.no_response,
}

# First match wins when aggregating a guest's RSVPs
RSVP_PRECEDENCE = (
    RsvpStatus.confirmed,
    RsvpStatus.maybe,
    RsvpStatus.declined,
)


class InviteStatus(str, Enum):
    """Invite delivery/lifecycle status"""

    sent = "sent"
    delivered = "delivered"
    opened = "opened"
    expired = "expired"
    revoked = "revoked"


class InviteChannel(str, Enum):
    """Outbound channel an invite is delivered through"""

    email = "email"
    whatsapp = "whatsapp"
    sms = "sms"


class CheckinMethod(str, Enum):
    """How an arrival was registered"""

    qr = "qr"
    manual = "manual"


class MessageStatus(str, Enum):
    """Delivery log status"""

    draft = "draft"
    sending = "sending"
    sent = "sent"
    delivered = "delivered"
    clicked = "clicked"
    failed = "failed"


class RsvpAccessMode(str, Enum):
    """Who may submit a public RSVP without an invite"""

    inherit = "inherit"
    open = "open"
    restricted = "restricted"
    token_only = "token_only"
