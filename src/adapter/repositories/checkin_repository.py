from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import distinct, func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.checkin_repository import ICheckinRepository
from src.domain.entities import Checkin, Event, Guest


class CheckinRepository(ICheckinRepository):
    """Checkin repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_latest_for_guest(
        self, guest_id: UUID, event_id: Optional[UUID]
    ) -> Optional[Checkin]:
        stmt = select(Checkin).where(Checkin.guest_id == guest_id)
        if event_id is None:
            stmt = stmt.where(Checkin.event_id.is_(None))
        else:
            stmt = stmt.where(Checkin.event_id == event_id)
        stmt = stmt.order_by(Checkin.checked_in_at.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, checkin: Checkin) -> Optional[Checkin]:
        """Insert inside a savepoint; None when the (guest, event) pair already exists"""
        try:
            async with self.session.begin_nested():
                self.session.add(checkin)
                await self.session.flush()
        except IntegrityError:
            return None
        await self.session.refresh(checkin)
        return checkin

    def _filtered(self, stmt, wedding_id, event_id, method, search):
        stmt = stmt.select_from(Checkin).join(Guest, Guest.id == Checkin.guest_id).where(
            Guest.wedding_id == wedding_id
        )
        if event_id is not None:
            stmt = stmt.where(Checkin.event_id == event_id)
        if method:
            stmt = stmt.where(Checkin.method == method)
        if search:
            like = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Guest.name).like(like),
                    func.lower(func.coalesce(Guest.email, "")).like(like),
                    func.lower(func.coalesce(Guest.phone, "")).like(like),
                )
            )
        return stmt

    async def list_for_wedding(
        self,
        wedding_id: UUID,
        event_id: Optional[UUID] = None,
        method: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        stmt = self._filtered(
            select(Checkin, Guest.id, Guest.name, Guest.email, Guest.phone, Event),
            wedding_id, event_id, method, search
        )
        stmt = (
            stmt.outerjoin(Event, Event.id == Checkin.event_id)
            .order_by(Checkin.checked_in_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)

        items = []
        for checkin, guest_id, name, email, phone, event in result.all():
            items.append(
                {
                    "id": str(checkin.id),
                    "checked_in_at": checkin.checked_in_at.isoformat(),
                    "method": getattr(checkin.method, "value", checkin.method),
                    "device_id": checkin.device_id,
                    "notes": checkin.notes,
                    "guest": {
                        "id": str(guest_id),
                        "name": name,
                        "email": email,
                        "phone": phone,
                    },
                    "event": {
                        "id": str(event.id) if event else None,
                        "name": event.name if event else None,
                    },
                    "operator_id": str(checkin.operator_id) if checkin.operator_id else None,
                }
            )
        return items

    async def summarize_for_wedding(
        self,
        wedding_id: UUID,
        event_id: Optional[UUID] = None,
        method: Optional[str] = None,
        search: Optional[str] = None,
        today_start: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        totals_stmt = self._filtered(
            select(func.count(Checkin.id), func.count(distinct(Checkin.guest_id))),
            wedding_id,
            event_id,
            method,
            search,
        )
        total, unique_guests = (await self.session.execute(totals_stmt)).one()

        checkins_today = 0
        if today_start is not None:
            today_stmt = self._filtered(
                select(func.count(Checkin.id)), wedding_id, None, None, None
            ).where(Checkin.checked_in_at >= today_start)
            checkins_today = (await self.session.execute(today_stmt)).scalar_one()

        method_stmt = self._filtered(
            select(Checkin.method, func.count(Checkin.id).label("total")),
            wedding_id,
            event_id,
            method,
            search,
        ).group_by(Checkin.method)
        by_method = [
            {"method": getattr(row[0], "value", row[0]) or "manual", "total": int(row[1])}
            for row in (await self.session.execute(method_stmt)).all()
        ]

        event_stmt = (
            self._filtered(
                select(Checkin.event_id, Event.name, func.count(Checkin.id).label("total")),
                wedding_id,
                event_id,
                method,
                search,
            )
            .outerjoin(Event, Event.id == Checkin.event_id)
            .group_by(Checkin.event_id, Event.name)
        )
        by_event = [
            {
                "event_id": str(row[0]) if row[0] else None,
                "event_name": row[1] if row[0] else None,
                "total": int(row[2]),
            }
            for row in (await self.session.execute(event_stmt)).all()
        ]

        return {
            "total_checkins": int(total or 0),
            "unique_checked_in_guests": int(unique_guests or 0),
            "checkins_today": int(checkins_today or 0),
            "by_method": sorted(by_method, key=lambda row: row["total"], reverse=True),
            "by_event": sorted(by_event, key=lambda row: row["total"], reverse=True),
        }
