from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.optional_columns import OptionalColumns
from src.app.repositories.invite_repository import IInviteRepository
from src.app.services.schema_capabilities import SchemaCapabilities
from src.domain.entities import Household, Invite


class InviteRepository(IInviteRepository):
    """Invite repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession, capabilities: Optional[SchemaCapabilities] = None):
        self.session = session
        capabilities = capabilities or SchemaCapabilities.full()
        self.optional = OptionalColumns(
            Invite,
            [
                name
                for name in ("uses_count", "max_uses", "revoked_at", "revoked_reason")
                if not getattr(capabilities, name)
            ],
        )

    def _select(self):
        return select(Invite).options(*self.optional.options())

    async def _one(self, stmt) -> Optional[Invite]:
        result = await self.session.execute(stmt)
        return self.optional.fill(result.scalar_one_or_none())

    async def get_by_id(self, invite_id: UUID) -> Optional[Invite]:
        return await self._one(self._select().where(Invite.id == invite_id))

    async def get_by_id_for_update(self, invite_id: UUID) -> Optional[Invite]:
        stmt = (
            self._select()
            .where(Invite.id == invite_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return await self._one(stmt)

    async def get_by_token(self, token: str) -> Optional[Invite]:
        invite = await self._one(
            self._select().where(Invite.token_hash == Invite.hash_token(token))
        )
        if invite is not None:
            return invite

        # Rows issued before token_hash existed
        return await self._one(self._select().where(Invite.token == token))

    async def get_for_wedding(
        self, invite_id: UUID, wedding_id: UUID
    ) -> Optional[Invite]:
        stmt = (
            self._select()
            .join(Household, Household.id == Invite.household_id)
            .where(Invite.id == invite_id, Household.wedding_id == wedding_id)
        )
        return await self._one(stmt)

    async def get_by_ids_for_wedding(
        self, invite_ids: List[UUID], wedding_id: UUID
    ) -> List[Invite]:
        if not invite_ids:
            return []
        stmt = (
            self._select()
            .join(Household, Household.id == Invite.household_id)
            .where(Invite.id.in_(invite_ids), Household.wedding_id == wedding_id)
            .order_by(Invite.created_at)
        )
        result = await self.session.execute(stmt)
        return self.optional.fill_all(list(result.scalars().all()))

    async def create(self, invite: Invite) -> Invite:
        self.optional.before_insert(invite)
        self.session.add(invite)
        await self.session.flush()
        await self.session.refresh(invite, attribute_names=self.optional.loaded_names())
        return self.optional.fill(invite)

    async def update(self, invite: Invite) -> Invite:
        self.optional.before_update(invite)
        self.session.add(invite)
        await self.session.flush()
        await self.session.refresh(invite, attribute_names=self.optional.loaded_names())
        return self.optional.fill(invite)
