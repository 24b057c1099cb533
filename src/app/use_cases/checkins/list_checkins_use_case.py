"""
List Check-ins Use Case

Read-only listing and aggregation of a wedding's check-ins.
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from src.app.services.audit_log_writer import AuditAction
from src.app.services.checkin_recorder import CheckinRecorder, parse_method
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.errors import DomainError
from src.libs.result import Result, Return

from .dtos import CheckinListResponse

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


class ListCheckinsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        wedding_id: UUID,
        event_id: Optional[UUID] = None,
        method: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Result[CheckinListResponse]:
        """
        Returns:
            Result with the newest check-ins (limit clamped to 1..200) and a
            summary: totals, unique guests, today's count (wedding-wide),
            duplicates ignored in the last 24h, by_method and by_event
        """
        limit = max(1, min(int(limit or DEFAULT_LIMIT), MAX_LIMIT))
        search = (search or "").strip() or None

        async with self.uow:
            try:
                if event_id is not None:
                    await CheckinRecorder(self.uow).resolve_event(event_id, wedding_id)
                method_value = parse_method(method).value if method else None
            except DomainError as e:
                return Return.err(e.error)

            now = utcnow()
            items = await self.uow.checkins.list_for_wedding(
                wedding_id, event_id=event_id, method=method_value, search=search, limit=limit
            )
            summary = await self.uow.checkins.summarize_for_wedding(
                wedding_id,
                event_id=event_id,
                method=method_value,
                search=search,
                today_start=datetime(now.year, now.month, now.day),
            )
            summary["duplicates_ignored_24h"] = await self.uow.audit_logs.count_since(
                wedding_id, AuditAction.CHECKIN_DUPLICATE_IGNORED, now - timedelta(days=1)
            )

        return Return.ok(CheckinListResponse(items=items, summary=summary))
