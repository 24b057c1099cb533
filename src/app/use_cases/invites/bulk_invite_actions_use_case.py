"""
Bulk Invite Actions Use Cases

Reissue or revoke a batch of invites of one wedding.
"""

import logging
from typing import List, Optional
from uuid import UUID

from src.app.services.delivery_channel import IDeliveryChannel
from src.app.services.invite_lifecycle import InviteLifecycleManager
from src.app.services.schema_capabilities import SchemaCapabilities
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Invite, InviteStatus
from src.domain.errors import DomainError
from src.libs.result import Error, Result, Return

from .dtos import BulkReissueResponse, BulkRevokeResponse

logger = logging.getLogger(__name__)

MAX_BULK_INVITES = 200


async def _load_batch(
    uow: UnitOfWork, wedding_id: UUID, invite_ids: List[UUID]
) -> Optional[List[Invite]]:
    """All requested invites of the wedding, or None if any is missing."""
    unique_ids = list(dict.fromkeys(invite_ids))
    invites = await uow.invites.get_by_ids_for_wedding(unique_ids, wedding_id)
    if len(invites) != len(unique_ids):
        return None
    return invites


class BulkReissueInvitesUseCase:
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
        invite_ids: List[UUID],
        max_uses: Optional[int] = None,
        expires_in_days: Optional[int] = None,
        actor_id: Optional[UUID] = None,
    ) -> Result[BulkReissueResponse]:
        if not invite_ids or len(invite_ids) > MAX_BULK_INVITES:
            return Return.err(
                Error(
                    "INVALID_INVITE_SELECTION",
                    f"Select between 1 and {MAX_BULK_INVITES} invites",
                )
            )

        async with self.uow:
            invites = await _load_batch(self.uow, wedding_id, invite_ids)
            if invites is None:
                return Return.err(
                    Error("INVITE_NOT_FOUND", "Some invites were not found in this wedding")
                )

            manager = InviteLifecycleManager(self.uow, self.capabilities)
            summary = BulkReissueResponse(total=len(invites))

            for invite in invites:
                invite = await self.uow.invites.get_by_id_for_update(invite.id)
                if invite is None:
                    summary.failed += 1
                    continue

                try:
                    invite = await manager.reissue(
                        invite,
                        wedding_id,
                        max_uses=max_uses,
                        expires_in_days=expires_in_days,
                        actor_id=actor_id,
                    )
                except DomainError as e:
                    logger.warning(f"Bulk reissue failed for invite {invite.id}: {e.code}")
                    summary.failed += 1
                    continue

                summary.reissued += 1
                if self.delivery_channel is None:
                    continue

                result = await self.delivery_channel.send(invite)
                if result.ok:
                    summary.sent += 1
                else:
                    summary.failed_to_send += 1

            await self.uow.commit()

            return Return.ok(summary)


class BulkRevokeInvitesUseCase:
    def __init__(self, uow: UnitOfWork, capabilities: Optional[SchemaCapabilities] = None):
        self.uow = uow
        self.capabilities = capabilities

    async def execute(
        self,
        wedding_id: UUID,
        invite_ids: List[UUID],
        reason: Optional[str] = None,
        actor_id: Optional[UUID] = None,
    ) -> Result[BulkRevokeResponse]:
        if not invite_ids or len(invite_ids) > MAX_BULK_INVITES:
            return Return.err(
                Error(
                    "INVALID_INVITE_SELECTION",
                    f"Select between 1 and {MAX_BULK_INVITES} invites",
                )
            )

        async with self.uow:
            invites = await _load_batch(self.uow, wedding_id, invite_ids)
            if invites is None:
                return Return.err(
                    Error("INVITE_NOT_FOUND", "Some invites were not found in this wedding")
                )

            manager = InviteLifecycleManager(self.uow, self.capabilities)
            summary = BulkRevokeResponse(total=len(invites))

            for invite in invites:
                invite = await self.uow.invites.get_by_id_for_update(invite.id)
                if invite is None:
                    summary.failed += 1
                    continue

                if invite.status == InviteStatus.revoked:
                    summary.already_revoked += 1
                    continue

                try:
                    await manager.revoke(invite, wedding_id, reason, actor_id)
                except DomainError as e:
                    logger.warning(f"Bulk revoke failed for invite {invite.id}: {e.code}")
                    summary.failed += 1
                    continue

                summary.revoked += 1

            await self.uow.commit()

            return Return.ok(summary)
