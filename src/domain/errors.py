"""
Guest Engine Domain Errors

Typed exceptions raised by helper services. Each carries the ``Error`` a use
case returns and the HTTP-like status the API renders it with.
"""

from typing import Optional

from src.libs.result import Error


class DomainError(Exception):
    status_code: int = 400

    def __init__(self, code: str, message: str, status_code: Optional[int] = None):
        self.error = Error(code, message)
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.error.code


class ValidationError(DomainError):
    """Malformed or missing input"""

    status_code = 422


class RsvpSubmissionError(ValidationError):
    """RSVP cannot be accepted; status_code is 404/409/410/422/403"""


class InvalidCode(ValidationError):
    """QR payload cannot be resolved to a guest of this wedding"""

    MALFORMED = "malformed"
    TENANT_MISMATCH = "tenant_mismatch"

    def __init__(self, message: str, reason: str = MALFORMED):
        super().__init__("INVALID_CODE", message)
        self.reason = reason


class UnsupportedOperation(DomainError):
    """Persisted schema lacks the columns this operation needs"""

    status_code = 501


class TransientFailure(DomainError):
    """Delivery channel failure; recorded, never propagated as a fault"""

    status_code = 502
