from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import to_http_error
from src.app.services.schema_capabilities import SchemaCapabilities
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.rsvp import (
    GuestData,
    PublicRsvpResponse,
    RsvpResponse,
    SubmitAuthenticatedRsvpUseCase,
    SubmitPublicRsvpUseCase,
)
from src.depends import get_capabilities, get_current_user, get_unit_of_work

router = APIRouter(tags=["RSVP"])


class AuthenticatedRsvpRequest(BaseModel):
    event_id: UUID
    guest_id: UUID
    status: str = Field(..., description="confirmed, declined, maybe or pending")
    responses: Optional[Dict[str, Any]] = None


class PublicRsvpRequest(BaseModel):
    event_id: UUID
    status: str = Field(..., description="confirmed, declined, maybe or pending")
    token: Optional[str] = Field(None, description="Invite token from the shared link")
    guest: Optional[GuestData] = None
    household_name: Optional[str] = Field(None, max_length=200)
    responses: Optional[Dict[str, Any]] = None


@router.post("/rsvp", response_model=RsvpResponse)
async def submit_rsvp(
    request: AuthenticatedRsvpRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Record an RSVP on behalf of a guest

    Raises:
        - 404 Not Found: GUEST_NOT_FOUND, EVENT_NOT_FOUND
        - 422 Unprocessable Entity: INVALID_ANSWER, TENANT_MISMATCH
    """
    use_case = SubmitAuthenticatedRsvpUseCase(uow)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        event_id=request.event_id,
        guest_id=request.guest_id,
        status=request.status,
        responses=request.responses,
        actor_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/public/rsvp", response_model=PublicRsvpResponse)
async def submit_public_rsvp(
    request: PublicRsvpRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    capabilities: SchemaCapabilities = Depends(get_capabilities),
):
    """
    Guest-facing RSVP submission

    No operator authentication. The wedding is taken from the event, and the
    event's access rules decide whether an invite token is required.

    Raises:
        - 403 Forbidden: RSVP_RESTRICTED
        - 404 Not Found: EVENT_NOT_FOUND, INVITE_NOT_FOUND
        - 409 Conflict: RSVP_ALREADY_ANSWERED, INVITE_EXHAUSTED
        - 410 Gone: INVITE_REVOKED, INVITE_EXPIRED
        - 422 Unprocessable Entity: INVITE_REQUIRED, EVENT_INACTIVE, INVALID_GUEST_DATA, INVALID_ANSWER
    """
    use_case = SubmitPublicRsvpUseCase(
        uow,
        default_access=ApplicationConfig.DEFAULT_RSVP_ACCESS,
        capabilities=capabilities,
    )
    result = await use_case.execute(
        event_id=request.event_id,
        status=request.status,
        guest=request.guest,
        token=request.token,
        household_name=request.household_name,
        responses=request.responses,
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
