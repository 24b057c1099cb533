"""
Create Invite Use Case

Issues an invite for a household and attempts its first delivery.
"""

from typing import Optional
from uuid import UUID

from src.app.services.delivery_channel import IDeliveryChannel
from src.app.services.invite_lifecycle import InviteLifecycleManager
from src.app.services.schema_capabilities import SchemaCapabilities
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import InviteChannel
from src.domain.errors import DomainError
from src.libs.result import Error, Result, Return

from .dtos import DeliveryInfo, InviteResponse


class CreateInviteUseCase:
    """
    Business Rules:
    - household must belong to the caller's wedding
    - a pinned guest must belong to the same wedding as the household
    - delivery failure is reported in the response, never as an error
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
        household_id: UUID,
        guest_id: Optional[UUID] = None,
        channel: Optional[InviteChannel] = None,
        max_uses: Optional[int] = None,
        expires_in_days: Optional[int] = None,
        actor_id: Optional[UUID] = None,
    ) -> Result[InviteResponse]:
        async with self.uow:
            household = await self.uow.households.get_by_id(household_id)
            if household is None or household.wedding_id != wedding_id:
                return Return.err(Error("HOUSEHOLD_NOT_FOUND", "Household not found"))

            manager = InviteLifecycleManager(self.uow, self.capabilities)
            try:
                invite = await manager.create_for_household(
                    household,
                    guest_id=guest_id,
                    channel=channel,
                    max_uses=max_uses,
                    expires_in_days=expires_in_days,
                    actor_id=actor_id,
                )
            except DomainError as e:
                return Return.err(e.error)

            delivery = None
            if self.delivery_channel is not None:
                result = await self.delivery_channel.send(invite)
                delivery = DeliveryInfo(ok=result.ok, message=result.message)

            await self.uow.commit()

            return Return.ok(InviteResponse.from_entity(invite, delivery))
