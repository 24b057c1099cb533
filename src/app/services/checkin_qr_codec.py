"""
Check-in QR Codec

Issues and resolves the encrypted guest envelope embedded in check-in QR
codes. The envelope is ``{v, tenant_id, guest_id, issued_at}`` encrypted as a
compact JWE (dir + A256GCM), prefixed with a namespace marker so scanners can
tell our codes apart from arbitrary QR content.
"""

import hashlib
import json
import logging
from typing import Dict, Optional, Union
from uuid import UUID

from jose import jwe
from jose.exceptions import JOSEError

from src.domain.base import utcnow
from src.domain.entities import Guest
from src.domain.errors import InvalidCode

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "dmc-checkin:"
ENVELOPE_VERSION = 1


class CheckinQrCodec:
    def __init__(self, secret: Union[str, bytes], prefix: str = DEFAULT_PREFIX):
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        if not secret:
            raise ValueError("QR encryption secret must not be empty")
        # A256GCM with direct encryption needs exactly 32 key bytes
        self._key = hashlib.sha256(secret).digest()
        self.prefix = prefix

    def issue(self, guest: Guest) -> Dict[str, str]:
        """Return the bare token and the prefixed QR content for a guest."""
        envelope = {
            "v": ENVELOPE_VERSION,
            "tenant_id": str(guest.wedding_id),
            "guest_id": str(guest.id),
            "issued_at": utcnow().isoformat() + "Z",
        }
        token = jwe.encrypt(
            json.dumps(envelope, separators=(",", ":")),
            self._key,
            algorithm="dir",
            encryption="A256GCM",
        )
        if isinstance(token, bytes):
            token = token.decode("ascii")
        return {"token": token, "qr_content": self.prefix + token}

    def resolve(self, raw_code: Optional[str], wedding_id: UUID) -> UUID:
        """
        Decode a scanned code into the guest id it was issued for.

        Raises:
            InvalidCode: reason "malformed" when the code cannot be decrypted
                or lacks ids, "tenant_mismatch" when it was issued for another
                wedding
        """
        token = self._extract_token(raw_code)

        try:
            envelope = json.loads(jwe.decrypt(token, self._key))
        except (JOSEError, ValueError, TypeError, IndexError, KeyError) as exc:
            logger.warning(f"QR code rejected: undecryptable payload ({type(exc).__name__})")
            raise InvalidCode("Invalid QR code.")

        if not isinstance(envelope, dict):
            logger.warning("QR code rejected: envelope is not an object")
            raise InvalidCode("Invalid QR code.")

        guest_id = str(envelope.get("guest_id") or "").strip()
        payload_wedding_id = str(envelope.get("tenant_id") or "").strip()
        if not guest_id or not payload_wedding_id:
            logger.warning("QR code rejected: envelope missing guest or tenant id")
            raise InvalidCode("Invalid QR code.")

        if payload_wedding_id != str(wedding_id):
            logger.warning(
                f"QR code rejected: issued for wedding {payload_wedding_id}, "
                f"scanned at wedding {wedding_id}"
            )
            raise InvalidCode(
                "QR code does not belong to this wedding.",
                reason=InvalidCode.TENANT_MISMATCH,
            )

        try:
            return UUID(guest_id)
        except ValueError:
            logger.warning("QR code rejected: guest id is not a UUID")
            raise InvalidCode("Invalid QR code.")

    def _extract_token(self, raw_code: Optional[str]) -> str:
        normalized = (raw_code or "").strip()
        if normalized.startswith(self.prefix):
            normalized = normalized[len(self.prefix):]
        if not normalized:
            raise InvalidCode("Invalid QR code.")
        return normalized
