from abc import ABC, abstractmethod
from dataclasses import dataclass

from src.domain.entities import Invite


@dataclass(frozen=True)
class DeliveryResult:
    ok: bool
    message: str


class IDeliveryChannel(ABC):
    """Outbound invite delivery (email / WhatsApp / SMS)"""

    @abstractmethod
    async def send(self, invite: Invite) -> DeliveryResult:
        """Attempt one delivery; failures are reported in the result, never raised"""
        pass
