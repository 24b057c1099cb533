from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import to_http_error
from src.app.services.delivery_channel import IDeliveryChannel
from src.app.services.schema_capabilities import SchemaCapabilities
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.incidents import GetInviteTimelineUseCase, InviteTimelineResponse
from src.app.use_cases.invites import (
    BulkReissueInvitesUseCase,
    BulkReissueResponse,
    BulkRevokeInvitesUseCase,
    BulkRevokeResponse,
    CreateInviteUseCase,
    InviteResponse,
    ReissueInviteUseCase,
    RevokeInviteUseCase,
)
from src.depends import (
    get_capabilities,
    get_current_user,
    get_delivery_channel,
    get_unit_of_work,
)
from src.domain.entities import InviteChannel

router = APIRouter(tags=["Invites"])


class CreateInviteRequest(BaseModel):
    guest_id: Optional[UUID] = Field(None, description="Pin the invite to one guest")
    channel: InviteChannel = Field(InviteChannel.email)
    expires_in_days: Optional[int] = Field(None, ge=1, le=365)
    max_uses: Optional[int] = Field(None, ge=1, le=1000)


class ReissueInviteRequest(BaseModel):
    expires_in_days: Optional[int] = Field(None, ge=1, le=365)
    max_uses: Optional[int] = Field(None, ge=1, le=1000)


class RevokeInviteRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class BulkReissueRequest(ReissueInviteRequest):
    invite_ids: List[UUID] = Field(..., min_length=1, max_length=200)


class BulkRevokeRequest(RevokeInviteRequest):
    invite_ids: List[UUID] = Field(..., min_length=1, max_length=200)


@router.post(
    "/households/{household_id}/invites",
    status_code=status.HTTP_201_CREATED,
    response_model=InviteResponse,
)
async def create_invite(
    household_id: UUID,
    request: CreateInviteRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    delivery_channel: IDeliveryChannel = Depends(get_delivery_channel),
    capabilities: SchemaCapabilities = Depends(get_capabilities),
):
    """
    Create Invite

    Issues a new invite for the household and attempts delivery.

    Raises:
        - 404 Not Found: HOUSEHOLD_NOT_FOUND
        - 422 Unprocessable Entity: INVALID_GUEST_DATA
    """
    use_case = CreateInviteUseCase(uow, delivery_channel, capabilities)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        household_id=household_id,
        guest_id=request.guest_id,
        channel=request.channel,
        max_uses=request.max_uses,
        expires_in_days=request.expires_in_days,
        actor_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/invites/bulk/reissue", response_model=BulkReissueResponse)
async def bulk_reissue_invites(
    request: BulkReissueRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    delivery_channel: IDeliveryChannel = Depends(get_delivery_channel),
    capabilities: SchemaCapabilities = Depends(get_capabilities),
):
    use_case = BulkReissueInvitesUseCase(uow, delivery_channel, capabilities)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        invite_ids=request.invite_ids,
        max_uses=request.max_uses,
        expires_in_days=request.expires_in_days,
        actor_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/invites/bulk/revoke", response_model=BulkRevokeResponse)
async def bulk_revoke_invites(
    request: BulkRevokeRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    capabilities: SchemaCapabilities = Depends(get_capabilities),
):
    use_case = BulkRevokeInvitesUseCase(uow, capabilities)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        invite_ids=request.invite_ids,
        reason=request.reason,
        actor_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/invites/{invite_id}/reissue", response_model=InviteResponse)
async def reissue_invite(
    invite_id: UUID,
    request: ReissueInviteRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    delivery_channel: IDeliveryChannel = Depends(get_delivery_channel),
    capabilities: SchemaCapabilities = Depends(get_capabilities),
):
    """
    Reissue Invite

    New token, usage counters reset, revocation cleared, then re-sent.

    Raises:
        - 404 Not Found: INVITE_NOT_FOUND
    """
    use_case = ReissueInviteUseCase(uow, delivery_channel, capabilities)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        invite_id=invite_id,
        max_uses=request.max_uses,
        expires_in_days=request.expires_in_days,
        actor_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.delete("/invites/{invite_id}", response_model=InviteResponse)
async def revoke_invite(
    invite_id: UUID,
    request: Optional[RevokeInviteRequest] = None,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    capabilities: SchemaCapabilities = Depends(get_capabilities),
):
    """
    Revoke Invite

    Raises:
        - 404 Not Found: INVITE_NOT_FOUND
        - 501 Not Implemented: REVOCATION_UNSUPPORTED
    """
    use_case = RevokeInviteUseCase(uow, capabilities)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        invite_id=invite_id,
        reason=request.reason if request else None,
        actor_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.get("/invites/{invite_id}/timeline", response_model=InviteTimelineResponse)
async def get_invite_timeline(
    invite_id: UUID,
    limit: int = Query(50, ge=1, le=200),
    include_text: bool = Query(False),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Invite Timeline

    Creation, audit entries and delivery log of one invite, newest first.
    """
    use_case = GetInviteTimelineUseCase(uow)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        invite_id=invite_id,
        limit=limit,
        include_text=include_text,
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
