"""
RSVP Use Cases

Authenticated (operator) and public (guest-facing) RSVP submission.
"""

from .dtos import GuestData, PublicRsvpResponse, RsvpResponse
from .submit_authenticated_rsvp_use_case import SubmitAuthenticatedRsvpUseCase
from .submit_public_rsvp_use_case import SubmitPublicRsvpUseCase

__all__ = [
    "SubmitAuthenticatedRsvpUseCase",
    "SubmitPublicRsvpUseCase",
    "GuestData",
    "RsvpResponse",
    "PublicRsvpResponse",
]
