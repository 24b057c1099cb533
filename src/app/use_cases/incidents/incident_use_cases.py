"""
Invite Incident Use Cases

Failed-delivery overview, operator-triggered retries and per-invite
timelines.
"""

from typing import Optional
from uuid import UUID

from src.app.services.delivery_channel import IDeliveryChannel
from src.app.services.invite_incidents import DEFAULT_RANGE, InviteIncidentService
from src.app.services.timeline import InviteTimelineService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.events.dtos import TimelineEntryResponse
from src.domain.entities import InviteChannel
from src.libs.result import Error, Result, Return

from .dtos import (
    InviteIncidentsResponse,
    InviteTimelineResponse,
    RetryChannelResponse,
    RetryInviteResponse,
)


class GetInviteIncidentsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        wedding_id: UUID,
        range_key: str = DEFAULT_RANGE,
        queue_limit: int = 20,
        sample_limit: int = 500,
    ) -> Result[InviteIncidentsResponse]:
        async with self.uow:
            service = InviteIncidentService(self.uow)
            incidents = await service.for_wedding(
                wedding_id, range_key, queue_limit=queue_limit, sample_limit=sample_limit
            )

        return Return.ok(InviteIncidentsResponse(**incidents))


class RetryInviteUseCase:
    """
    Re-sends one invite. Blocked (revoked / expired / exhausted) and
    not-found outcomes are reported in the response, not as errors.
    """

    def __init__(self, uow: UnitOfWork, delivery_channel: IDeliveryChannel):
        self.uow = uow
        self.delivery_channel = delivery_channel

    async def execute(
        self, wedding_id: UUID, invite_id: UUID, actor_id: Optional[UUID] = None
    ) -> Result[RetryInviteResponse]:
        async with self.uow:
            service = InviteIncidentService(self.uow, self.delivery_channel)
            result = await service.retry_invite_by_id(wedding_id, invite_id, actor_id)
            await self.uow.commit()

        return Return.ok(
            RetryInviteResponse(ok=result.ok, type=result.type, message=result.message)
        )


class RetryFailedByChannelUseCase:
    def __init__(self, uow: UnitOfWork, delivery_channel: IDeliveryChannel):
        self.uow = uow
        self.delivery_channel = delivery_channel

    async def execute(
        self,
        wedding_id: UUID,
        channel: str,
        range_key: str = DEFAULT_RANGE,
        limit: int = 20,
        actor_id: Optional[UUID] = None,
    ) -> Result[RetryChannelResponse]:
        if channel not in {c.value for c in InviteChannel}:
            return Return.err(Error("INVALID_CHANNEL", "Unknown delivery channel"))

        async with self.uow:
            service = InviteIncidentService(self.uow, self.delivery_channel)
            summary = await service.retry_failed_by_channel(
                wedding_id, channel, range_key, limit, actor_id
            )
            await self.uow.commit()

        return Return.ok(RetryChannelResponse(**summary))


class GetInviteTimelineUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        wedding_id: UUID,
        invite_id: UUID,
        limit: int = 50,
        include_text: bool = False,
    ) -> Result[InviteTimelineResponse]:
        limit = max(1, min(limit, 200))

        async with self.uow:
            invite = await self.uow.invites.get_for_wedding(invite_id, wedding_id)
            if invite is None:
                return Return.err(Error("INVITE_NOT_FOUND", "Invite not found"))

            service = InviteTimelineService(self.uow)
            entries = await service.timeline_for_invite(invite, wedding_id, limit)
            text = (
                await service.timeline_text(invite, wedding_id, limit)
                if include_text
                else None
            )

            return Return.ok(
                InviteTimelineResponse(
                    invite_id=str(invite.id),
                    events=[TimelineEntryResponse.from_entry(entry) for entry in entries],
                    text=text,
                )
            )
