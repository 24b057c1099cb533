from typing import Any, Dict, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditLog


def _jsonable(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    return value


class AuditLogWriter:
    """
    Appends audit entries through the caller's unit of work.

    The entry is flushed in the same session as the mutation it describes,
    so it becomes visible only if that transaction commits.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def record(
        self,
        wedding_id: UUID,
        action: str,
        context: Optional[Dict[str, Any]] = None,
        actor_id: Optional[UUID] = None,
    ) -> AuditLog:
        entry = AuditLog(
            wedding_id=wedding_id,
            actor_id=actor_id,
            action=action,
            context={k: _jsonable(v) for k, v in (context or {}).items()},
        )
        return await self.uow.audit_logs.create(entry)


class AuditAction:
    """Audit action names"""

    INVITE_CREATED = "guest.invite.created"
    INVITE_REISSUED = "guest.invite.reissued"
    INVITE_REVOKED = "guest.invite.revoked"
    INVITE_USED = "guest.invite.used"
    INVITE_RETRY_SENT = "guest.invite.retry_sent"
    INVITE_RETRY_FAILED = "guest.invite.retry_failed"
    RSVP_AUTHENTICATED_SUBMITTED = "guest.rsvp.authenticated_submitted"
    RSVP_PUBLIC_SUBMITTED = "guest.rsvp.public_submitted"
    CHECKIN_RECORDED = "guest.checkin.recorded"
    CHECKIN_DUPLICATE_IGNORED = "guest.checkin.duplicate_ignored"
    EVENT_CREATED = "guest.event.created"
    EVENT_UPDATED = "guest.event.updated"
    EVENT_DELETED = "guest.event.deleted"
