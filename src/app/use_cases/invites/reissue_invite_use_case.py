"""
Reissue Invite Use Case

Regenerates an invite's token and usage slate, then re-sends it.
"""

from typing import Optional
from uuid import UUID

from src.app.services.delivery_channel import IDeliveryChannel
from src.app.services.invite_lifecycle import InviteLifecycleManager
from src.app.services.schema_capabilities import SchemaCapabilities
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return

from .dtos import DeliveryInfo, InviteResponse


class ReissueInviteUseCase:
    """
    Reissue is the only way back from revoked, expired or exhausted. It is
    also allowed on an invite that is still usable; the old token stops
    working immediately.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        delivery_channel: Optional[IDeliveryChannel] = None,
        capabilities: Optional[SchemaCapabilities] = None,
    ):
        self.uow = uow
        self.delivery_channel = delivery_channel
        self.capabilities = capabilities

    async def execute(
        self,
        wedding_id: UUID,
        invite_id: UUID,
        max_uses: Optional[int] = None,
        expires_in_days: Optional[int] = None,
        actor_id: Optional[UUID] = None,
    ) -> Result[InviteResponse]:
        async with self.uow:
            invite = await self.uow.invites.get_for_wedding(invite_id, wedding_id)
            if invite is None:
                return Return.err(Error("INVITE_NOT_FOUND", "Invite not found"))

            invite = await self.uow.invites.get_by_id_for_update(invite.id)

            manager = InviteLifecycleManager(self.uow, self.capabilities)
            invite = await manager.reissue(
                invite,
                wedding_id,
                max_uses=max_uses,
                expires_in_days=expires_in_days,
                actor_id=actor_id,
            )

            delivery = None
            if self.delivery_channel is not None:
                result = await self.delivery_channel.send(invite)
                delivery = DeliveryInfo(ok=result.ok, message=result.message)

            await self.uow.commit()

            return Return.ok(InviteResponse.from_entity(invite, delivery))
