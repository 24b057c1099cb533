"""
Event Use Cases

RSVP event maintenance and change history.
"""

from .dtos import EventData, EventHistoryResponse, EventResponse, TimelineEntryResponse
from .event_use_cases import CreateEventUseCase, GetEventHistoryUseCase, UpdateEventUseCase

__all__ = [
    "CreateEventUseCase",
    "UpdateEventUseCase",
    "GetEventHistoryUseCase",
    "EventData",
    "EventResponse",
    "EventHistoryResponse",
    "TimelineEntryResponse",
]
