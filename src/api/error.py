from fastapi import status
from src.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


ERROR_STATUS = {
    "INVITE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "GUEST_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "EVENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "HOUSEHOLD_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVITE_EXHAUSTED": status.HTTP_409_CONFLICT,
    "RSVP_ALREADY_ANSWERED": status.HTTP_409_CONFLICT,
    "CHECKIN_CONFLICT": status.HTTP_409_CONFLICT,
    "INVITE_REVOKED": status.HTTP_410_GONE,
    "INVITE_EXPIRED": status.HTTP_410_GONE,
    "INVALID_ANSWER": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_GUEST_DATA": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_EVENT_DATA": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_INVITE_SELECTION": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_CHANNEL": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "TENANT_MISMATCH": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "EVENT_INACTIVE": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_METHOD": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_CODE": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVITE_REQUIRED": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "RSVP_RESTRICTED": status.HTTP_403_FORBIDDEN,
    "REVOCATION_UNSUPPORTED": status.HTTP_501_NOT_IMPLEMENTED,
}


def to_http_error(error: Error) -> Exception:
    """ClientError with the mapped status, or ServerError for unknown codes."""
    status_code = ERROR_STATUS.get(error.code)
    if status_code is None:
        return ServerError(error)
    return ClientError(error, status_code=status_code)
