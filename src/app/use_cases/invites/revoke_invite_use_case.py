"""
Revoke Invite Use Case

Permanently disables an invite until it is reissued.
"""

from typing import Optional
from uuid import UUID

from src.app.services.invite_lifecycle import InviteLifecycleManager
from src.app.services.schema_capabilities import SchemaCapabilities
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import DomainError
from src.libs.result import Error, Result, Return

from .dtos import InviteResponse


class RevokeInviteUseCase:
    def __init__(self, uow: UnitOfWork, capabilities: Optional[SchemaCapabilities] = None):
        self.uow = uow
        self.capabilities = capabilities

    async def execute(
        self,
        wedding_id: UUID,
        invite_id: UUID,
        reason: Optional[str] = None,
        actor_id: Optional[UUID] = None,
    ) -> Result[InviteResponse]:
        """
        Returns:
            Result with the revoked invite, or REVOCATION_UNSUPPORTED when the
            installation predates the revocation columns
        """
        async with self.uow:
            invite = await self.uow.invites.get_for_wedding(invite_id, wedding_id)
            if invite is None:
                return Return.err(Error("INVITE_NOT_FOUND", "Invite not found"))

            invite = await self.uow.invites.get_by_id_for_update(invite.id)

            manager = InviteLifecycleManager(self.uow, self.capabilities)
            try:
                invite = await manager.revoke(invite, wedding_id, reason, actor_id)
            except DomainError as e:
                return Return.err(e.error)

            await self.uow.commit()

            return Return.ok(InviteResponse.from_entity(invite))
