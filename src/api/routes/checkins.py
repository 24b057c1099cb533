from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import to_http_error
from src.app.services.checkin_qr_codec import CheckinQrCodec
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.checkins import (
    CheckinListResponse,
    CheckinResponse,
    GetGuestQrPayloadUseCase,
    ListCheckinsUseCase,
    QrPayloadResponse,
    RecordCheckinUseCase,
    ScanCheckinUseCase,
)
from src.depends import get_current_user, get_qr_codec, get_unit_of_work

router = APIRouter(tags=["Check-ins"])


class RecordCheckinRequest(BaseModel):
    guest_id: UUID
    event_id: Optional[UUID] = None
    method: str = Field("manual", description="manual or qr")
    device_id: Optional[str] = Field(None, max_length=120)
    notes: Optional[str] = Field(None, max_length=1000)


class ScanCheckinRequest(BaseModel):
    code: str = Field(..., min_length=1)
    event_id: Optional[UUID] = None
    device_id: Optional[str] = Field(None, max_length=120)
    notes: Optional[str] = Field(None, max_length=1000)


@router.post("/checkins", status_code=status.HTTP_201_CREATED, response_model=CheckinResponse)
async def record_checkin(
    request: RecordCheckinRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Register a guest arrival

    A repeated arrival for the same guest and event returns the existing
    check-in with duplicate=true.

    Raises:
        - 404 Not Found: GUEST_NOT_FOUND, EVENT_NOT_FOUND
        - 422 Unprocessable Entity: INVALID_METHOD, EVENT_INACTIVE, TENANT_MISMATCH
    """
    use_case = RecordCheckinUseCase(uow)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        guest_id=request.guest_id,
        event_id=request.event_id,
        method=request.method,
        device_id=request.device_id,
        notes=request.notes,
        operator_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/checkins/scan", status_code=status.HTTP_201_CREATED, response_model=CheckinResponse)
async def scan_checkin(
    request: ScanCheckinRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: CheckinQrCodec = Depends(get_qr_codec),
):
    """
    Register an arrival from a scanned QR code

    Raises:
        - 422 Unprocessable Entity: INVALID_CODE, TENANT_MISMATCH
    """
    use_case = ScanCheckinUseCase(uow, codec)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        code=request.code,
        event_id=request.event_id,
        device_id=request.device_id,
        notes=request.notes,
        operator_id=UUID(current_user["user_id"]),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.get("/checkins", response_model=CheckinListResponse)
async def list_checkins(
    event_id: Optional[UUID] = Query(None),
    method: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=120),
    limit: int = Query(50),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = ListCheckinsUseCase(uow)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        event_id=event_id,
        method=method,
        search=search,
        limit=limit,
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.get("/guests/{guest_id}/qr", response_model=QrPayloadResponse)
async def get_guest_qr(
    guest_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: CheckinQrCodec = Depends(get_qr_codec),
):
    """Encrypted check-in payload for printing as the guest's QR code."""
    use_case = GetGuestQrPayloadUseCase(uow, codec)
    result = await use_case.execute(
        wedding_id=UUID(current_user["tenant_id"]),
        guest_id=guest_id,
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
