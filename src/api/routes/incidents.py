from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from src.api.error import to_http_error
from src.app.services.delivery_channel import IDeliveryChannel
from src.app.services.invite_incidents import DEFAULT_RANGE
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.incidents import (
    GetInviteIncidentsUseCase,
    InviteIncidentsResponse,
    RetryChannelResponse,
    RetryFailedByChannelUseCase,
    RetryInviteResponse,
    RetryInviteUseCase,
)
from src.depends import get_current_user, get_delivery_channel, get_unit_of_work

router = APIRouter(prefix="/incidents", tags=["Invite Incidents"])


class RetryChannelRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    range_key: str = Field(DEFAULT_RANGE, alias="range", description="7d, 30d, 90d or all")
    limit: int = Field(20, ge=1, le=100)


@router.get("/invites", response_model=InviteIncidentsResponse)
async def get_invite_incidents(
    range_key: str = Query(DEFAULT_RANGE, alias="range"),
    limit: int = Query(20, ge=1, le=100),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delivery failure overview

    Failed message counts per channel and a queue of invites whose latest
    delivery failed.
    """
    use_case = GetInviteIncidentsUseCase(uow)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        range_key=range_key,
        queue_limit=limit,
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/invites/{invite_id}/retry", response_model=RetryInviteResponse)
async def retry_invite(
    invite_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    delivery_channel: IDeliveryChannel = Depends(get_delivery_channel),
):
    use_case = RetryInviteUseCase(uow, delivery_channel)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        invite_id=invite_id,
        actor_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/channels/{channel}/retry", response_model=RetryChannelResponse)
async def retry_failed_by_channel(
    channel: str,
    request: Optional[RetryChannelRequest] = None,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    delivery_channel: IDeliveryChannel = Depends(get_delivery_channel),
):
    """
    Retry every failed invite of one channel

    Revoked, expired and exhausted invites are skipped and counted as blocked.

    Raises:
        - 422 Unprocessable Entity: INVALID_CHANNEL
    """
    request = request or RetryChannelRequest()
    use_case = RetryFailedByChannelUseCase(uow, delivery_channel)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        channel=channel,
        range_key=request.range_key,
        limit=request.limit,
        actor_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
