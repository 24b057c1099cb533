"""
Invite and event timelines reconstructed from the audit log and the
message delivery log.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.app.services.audit_log_writer import AuditAction
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Event, Invite

HISTORY_FETCH_LIMIT = 100
NO_INVITE_EVENTS = "No events found for this invite."
NO_EVENT_HISTORY = "No history found for this event."

INVITE_AUDIT_ACTIONS = (
    AuditAction.INVITE_CREATED,
    AuditAction.INVITE_REISSUED,
    AuditAction.INVITE_REVOKED,
    AuditAction.INVITE_USED,
    AuditAction.RSVP_PUBLIC_SUBMITTED,
)
EVENT_AUDIT_ACTIONS = (
    AuditAction.EVENT_CREATED,
    AuditAction.EVENT_UPDATED,
    AuditAction.EVENT_DELETED,
)

_AUDIT_TITLES = {
    AuditAction.INVITE_CREATED: "Invite created (audit)",
    AuditAction.INVITE_REISSUED: "Invite reissued",
    AuditAction.INVITE_REVOKED: "Invite revoked",
    AuditAction.INVITE_USED: "Invite used",
    AuditAction.RSVP_PUBLIC_SUBMITTED: "Public RSVP submitted",
    AuditAction.EVENT_CREATED: "Event created",
    AuditAction.EVENT_UPDATED: "Event updated",
    AuditAction.EVENT_DELETED: "Event deleted",
}
_MESSAGE_TITLES = {
    "sending": "Delivery started",
    "sent": "Delivery completed",
    "delivered": "Message delivered",
    "clicked": "Link opened",
    "failed": "Delivery failed",
}
_CHANNEL_LABELS = {"email": "Email", "whatsapp": "WhatsApp", "sms": "SMS"}
_RSVP_LABELS = {
    "confirmed": "Confirmed",
    "declined": "Declined",
    "maybe": "Maybe",
    "no_response": "No response",
}


@dataclass
class TimelineEntry:
    occurred_at: Optional[datetime]
    source: str
    title: str
    details: str
    actor_id: Optional[str] = None

    def as_line(self) -> str:
        when = self.occurred_at.strftime("%d/%m/%Y %H:%M") if self.occurred_at else "no date"
        details = (self.details or "").strip()
        if not details:
            return f"[{when}] {self.title}"
        return f"[{when}] {self.title} - {details}"


def channel_label(channel: Any) -> str:
    value = str(getattr(channel, "value", channel) or "")
    return _CHANNEL_LABELS.get(value, value.capitalize() or "Unknown")


def _join(*parts: Optional[str]) -> str:
    return " | ".join(part for part in parts if part)


def _max_uses_label(context: Dict[str, Any]) -> str:
    max_uses = context.get("max_uses")
    return f"Max uses: {max_uses}" if max_uses is not None else "Max uses: unlimited"


def audit_details(action: str, context: Dict[str, Any]) -> str:
    if action in (AuditAction.INVITE_CREATED, AuditAction.INVITE_REISSUED):
        return _join(
            f"Channel: {channel_label(context['channel'])}" if context.get("channel") else None,
            _max_uses_label(context),
            f"Expires: {context['expires_at']}" if context.get("expires_at") else None,
        )
    if action == AuditAction.INVITE_REVOKED:
        return f"Reason: {context['reason']}" if context.get("reason") else "No reason given"
    if action == AuditAction.INVITE_USED:
        return _join(
            f"Uses: {context['uses_count']}" if context.get("uses_count") is not None else None,
            _max_uses_label(context),
        )
    if action == AuditAction.RSVP_PUBLIC_SUBMITTED:
        status = context.get("status")
        return _join(
            f"RSVP status: {_RSVP_LABELS.get(status, status)}" if status else None,
            f"Access: {context['access_mode']}" if context.get("access_mode") else None,
        )
    if action == AuditAction.EVENT_CREATED:
        return _join(
            f"Slug: {context['slug']}" if context.get("slug") else None,
            f"Active: {'yes' if context['is_active'] else 'no'}" if "is_active" in context else None,
            f"Questions: {int(context['questions_count'])}"
            if context.get("questions_count") is not None
            else None,
        )
    if action == AuditAction.EVENT_UPDATED:
        changed = context.get("changed_fields")
        return _join(
            f"Fields: {', '.join(changed)}" if isinstance(changed, list) and changed else None,
            f"Questions: {int(context['questions_before_count'])} -> "
            f"{int(context['questions_after_count'])}"
            if context.get("questions_before_count") is not None
            and context.get("questions_after_count") is not None
            else None,
            f"Active: {'yes' if context['is_active'] else 'no'}" if "is_active" in context else None,
        )
    if action == AuditAction.EVENT_DELETED:
        return f"Slug: {context['slug']}" if context.get("slug") else ""
    return ""


def render_text(entries: List[TimelineEntry], empty_message: str) -> str:
    if not entries:
        return empty_message
    return "\n".join(entry.as_line() for entry in entries)


class InviteTimelineService:
    """
    Per-invite timeline: the invite's own creation, the audit entries that
    embed its id, and the delivery logs of messages whose payload embeds it.
    Newest first.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def timeline_for_invite(
        self, invite: Invite, wedding_id: UUID, limit: int = 50
    ) -> List[TimelineEntry]:
        entries = [
            TimelineEntry(
                occurred_at=invite.created_at,
                source="invite",
                title="Invite created",
                details=f"Channel: {channel_label(invite.channel)}",
            )
        ]

        logs = await self.uow.audit_logs.list_by_context(
            wedding_id, "invite_id", str(invite.id), INVITE_AUDIT_ACTIONS, HISTORY_FETCH_LIMIT
        )
        for log in logs:
            context = log.context if isinstance(log.context, dict) else {}
            entries.append(
                TimelineEntry(
                    occurred_at=log.created_at,
                    source="audit",
                    title=_AUDIT_TITLES.get(log.action, log.action),
                    details=audit_details(log.action, context),
                    actor_id=str(log.actor_id) if log.actor_id else None,
                )
            )

        for message_log, message in await self.uow.messages.list_logs_for_invite(
            invite.id, HISTORY_FETCH_LIMIT
        ):
            details = message_log.details or {}
            status = str(getattr(message_log.status, "value", message_log.status))
            entries.append(
                TimelineEntry(
                    occurred_at=message_log.occurred_at,
                    source="message",
                    title=_MESSAGE_TITLES.get(status, f"Status: {status}"),
                    details=_join(
                        f"Channel: {channel_label(message.channel)}",
                        f"To: {details['contact']}" if details.get("contact") else None,
                        f"Error: {details['error']}" if details.get("error") else None,
                    ),
                )
            )

        entries.sort(
            key=lambda entry: entry.occurred_at or datetime.min, reverse=True
        )
        return entries[: max(1, limit)]

    async def timeline_text(self, invite: Invite, wedding_id: UUID, limit: int = 20) -> str:
        return render_text(
            await self.timeline_for_invite(invite, wedding_id, limit), NO_INVITE_EVENTS
        )


class EventHistoryService:
    """Change history of an RSVP event, read from guest.event.* audit entries."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def timeline_for_event(self, event: Event, limit: int = 30) -> List[TimelineEntry]:
        logs = await self.uow.audit_logs.list_by_context(
            event.wedding_id,
            "event_id",
            str(event.id),
            EVENT_AUDIT_ACTIONS,
            max(1, min(limit, 200)),
        )
        return [
            TimelineEntry(
                occurred_at=log.created_at,
                source="audit",
                title=_AUDIT_TITLES.get(log.action, log.action),
                details=audit_details(
                    log.action, log.context if isinstance(log.context, dict) else {}
                ),
                actor_id=str(log.actor_id) if log.actor_id else None,
            )
            for log in logs
        ]
