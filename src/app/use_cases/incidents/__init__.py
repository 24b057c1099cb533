"""
Invite Incident Use Cases

Delivery failure overview, retries and invite timelines.
"""

from .dtos import (
    InviteIncidentsResponse,
    InviteTimelineResponse,
    RetryChannelResponse,
    RetryInviteResponse,
)
from .incident_use_cases import (
    GetInviteIncidentsUseCase,
    GetInviteTimelineUseCase,
    RetryFailedByChannelUseCase,
    RetryInviteUseCase,
)

__all__ = [
    "GetInviteIncidentsUseCase",
    "RetryInviteUseCase",
    "RetryFailedByChannelUseCase",
    "GetInviteTimelineUseCase",
    "InviteIncidentsResponse",
    "RetryInviteResponse",
    "RetryChannelResponse",
    "InviteTimelineResponse",
]
