"""
Event Use Cases

Create and update RSVP events, and read their change history. Every write
leaves a guest.event.* audit entry keyed by the event id.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from src.app.services.audit_log_writer import AuditAction, AuditLogWriter
from src.app.services.question_validator import QuestionValidator
from src.app.services.timeline import NO_EVENT_HISTORY, EventHistoryService, render_text
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_naive_utc, slugify
from src.domain.entities import Event
from src.libs.result import Error, Result, Return

from .dtos import EventData, EventHistoryResponse, EventResponse, TimelineEntryResponse

_DATETIME_FIELDS = ("event_at", "active_from", "active_until")


def normalize_questions(questions: Optional[List[Any]]) -> Optional[List[Dict[str, Any]]]:
    """Stamp each question with a stable key and a known type."""
    if questions is None:
        return None

    normalized = []
    for index, question in enumerate(questions):
        if not isinstance(question, dict) or not str(question.get("label") or "").strip():
            raise ValueError(f"Question {index + 1} needs a label")
        options = question.get("options")
        normalized.append(
            {
                "key": QuestionValidator.resolve_key(question, index),
                "label": str(question["label"]).strip(),
                "type": QuestionValidator._normalize_type(question.get("type")),
                "required": bool(question.get("required", False)),
                "options": options if isinstance(options, list) else [],
            }
        )
    return normalized


def _changes(data: EventData) -> Dict[str, Any]:
    changes = data.model_dump(exclude_unset=True)
    for field in _DATETIME_FIELDS:
        if changes.get(field) is not None:
            changes[field] = as_naive_utc(changes[field])
    return changes


class CreateEventUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, wedding_id: UUID, data: EventData, actor_id: Optional[UUID] = None
    ) -> Result[EventResponse]:
        changes = _changes(data)
        name = (changes.pop("name", None) or "").strip()
        if not name:
            return Return.err(Error("INVALID_EVENT_DATA", "Event name is required"))

        try:
            questions = normalize_questions(changes.pop("questions", None)) or []
        except ValueError as e:
            return Return.err(Error("INVALID_EVENT_DATA", str(e)))

        slug = slugify(changes.pop("slug", None) or name)
        if changes.get("is_active") is None:
            changes.pop("is_active", None)

        async with self.uow:
            event = await self.uow.events.create(
                Event(
                    wedding_id=wedding_id,
                    created_by=actor_id,
                    name=name,
                    slug=slug,
                    questions=questions,
                    **changes,
                )
            )
            await AuditLogWriter(self.uow).record(
                wedding_id=wedding_id,
                action=AuditAction.EVENT_CREATED,
                context={
                    "event_id": event.id,
                    "slug": event.slug,
                    "is_active": event.is_active,
                    "questions_count": event.questions_count(),
                },
                actor_id=actor_id,
            )
            await self.uow.commit()

            return Return.ok(EventResponse.from_entity(event))


class UpdateEventUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        wedding_id: UUID,
        event_id: UUID,
        data: EventData,
        actor_id: Optional[UUID] = None,
    ) -> Result[EventResponse]:
        changes = _changes(data)
        try:
            if "questions" in changes:
                changes["questions"] = normalize_questions(changes["questions"]) or []
        except ValueError as e:
            return Return.err(Error("INVALID_EVENT_DATA", str(e)))
        if "slug" in changes:
            changes["slug"] = slugify(changes["slug"] or "")
        if "name" in changes and not (changes["name"] or "").strip():
            return Return.err(Error("INVALID_EVENT_DATA", "Event name is required"))

        async with self.uow:
            event = await self.uow.events.get_by_id(event_id)
            if event is None or event.wedding_id != wedding_id:
                return Return.err(Error("EVENT_NOT_FOUND", "Event not found"))

            questions_before = event.questions_count()
            changed_fields = []
            for field, value in changes.items():
                if getattr(event, field) != value:
                    setattr(event, field, value)
                    changed_fields.append(field)

            if not changed_fields:
                return Return.ok(EventResponse.from_entity(event))

            event = await self.uow.events.update(event)

            context: Dict[str, Any] = {
                "event_id": event.id,
                "changed_fields": changed_fields,
                "is_active": event.is_active,
            }
            if "questions" in changed_fields:
                context["questions_before_count"] = questions_before
                context["questions_after_count"] = event.questions_count()

            await AuditLogWriter(self.uow).record(
                wedding_id=wedding_id,
                action=AuditAction.EVENT_UPDATED,
                context=context,
                actor_id=actor_id,
            )
            await self.uow.commit()

            return Return.ok(EventResponse.from_entity(event))


class GetEventHistoryUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, wedding_id: UUID, event_id: UUID, limit: int = 30
    ) -> Result[EventHistoryResponse]:
        async with self.uow:
            event = await self.uow.events.get_by_id(event_id)
            if event is None or event.wedding_id != wedding_id:
                return Return.err(Error("EVENT_NOT_FOUND", "Event not found"))

            entries = await EventHistoryService(self.uow).timeline_for_event(event, limit)

            return Return.ok(
                EventHistoryResponse(
                    event_id=str(event.id),
                    events=[TimelineEntryResponse.from_entry(entry) for entry in entries],
                    text=render_text(entries, NO_EVENT_HISTORY),
                )
            )
