"""
Event Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from src.app.services.timeline import TimelineEntry
from src.domain.entities import Event


# ============================================================================
# Command DTOs
# ============================================================================


class EventData(BaseModel):
    """Writable event fields; on update only the fields sent are applied"""

    name: Optional[str] = None
    slug: Optional[str] = None
    event_at: Optional[datetime] = None
    is_active: Optional[bool] = None
    questions: Optional[List[Dict[str, Any]]] = None
    rules: Optional[Dict[str, Any]] = None
    active_from: Optional[datetime] = None
    active_until: Optional[datetime] = None


# ============================================================================
# Response DTOs
# ============================================================================


class EventResponse(BaseModel):
    id: str
    name: str
    slug: str
    event_at: Optional[datetime] = None
    is_active: bool
    questions: List[Dict[str, Any]]
    rules: Optional[Dict[str, Any]] = None
    active_from: Optional[datetime] = None
    active_until: Optional[datetime] = None

    @classmethod
    def from_entity(cls, event: Event) -> "EventResponse":
        return cls(
            id=str(event.id),
            name=event.name,
            slug=event.slug,
            event_at=event.event_at,
            is_active=event.is_active,
            questions=event.questions or [],
            rules=event.rules,
            active_from=event.active_from,
            active_until=event.active_until,
        )


class TimelineEntryResponse(BaseModel):
    occurred_at: Optional[datetime] = None
    source: str
    title: str
    details: str
    actor_id: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: TimelineEntry) -> "TimelineEntryResponse":
        return cls(
            occurred_at=entry.occurred_at,
            source=entry.source,
            title=entry.title,
            details=entry.details,
            actor_id=entry.actor_id,
        )


class EventHistoryResponse(BaseModel):
    event_id: str
    events: List[TimelineEntryResponse]
    text: str
