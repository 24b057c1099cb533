from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.error import to_http_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.events import (
    CreateEventUseCase,
    EventData,
    EventHistoryResponse,
    EventResponse,
    GetEventHistoryUseCase,
    UpdateEventUseCase,
)
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(tags=["Events"])


@router.post("/events", status_code=status.HTTP_201_CREATED, response_model=EventResponse)
async def create_event(
    request: EventData,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create an RSVP event

    Raises:
        - 422 Unprocessable Entity: INVALID_EVENT_DATA
    """
    use_case = CreateEventUseCase(uow)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        data=request,
        actor_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.patch("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    request: EventData,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = UpdateEventUseCase(uow)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        event_id=event_id,
        data=request,
        actor_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.get("/events/{event_id}/history", response_model=EventHistoryResponse)
async def get_event_history(
    event_id: UUID,
    limit: int = Query(30, ge=1, le=200),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = GetEventHistoryUseCase(uow)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        event_id=event_id,
        limit=limit,
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
