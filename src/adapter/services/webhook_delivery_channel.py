import logging
from typing import Dict, Mapping, Optional
from uuid import UUID, uuid4

import httpx

from src.app.services.delivery_channel import DeliveryResult, IDeliveryChannel
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import (
    Guest,
    Invite,
    InviteChannel,
    Message,
    MessageLog,
    MessageStatus,
)
from src.domain.errors import TransientFailure

logger = logging.getLogger(__name__)


class WebhookDeliveryChannel(IDeliveryChannel):
    """
    Delivers invites by POSTing to a per-channel webhook.

    Every attempt is recorded as a guest_messages row (payload embeds the
    invite id) plus a guest_message_logs row, written through the caller's
    unit of work so they commit together with the surrounding action.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        webhook_urls: Mapping[str, str],
        public_site_url: str,
        timeout: float = 10.0,
    ):
        self.uow = uow
        self.webhook_urls = dict(webhook_urls or {})
        self.public_site_url = public_site_url.rstrip("/")
        self.timeout = timeout

    async def send(self, invite: Invite) -> DeliveryResult:
        household = await self.uow.households.get_by_id(invite.household_id)
        if household is None:
            return DeliveryResult(False, "Invite has no valid household.")

        channel = InviteChannel(invite.channel or InviteChannel.email)
        recipient = await self._resolve_recipient(invite, channel)
        if recipient is None:
            return DeliveryResult(False, "No valid contact found for this channel.")

        link = self.build_invite_link(invite)
        text = self._build_message_text(invite, link, recipient.get("name"))

        message = await self.uow.messages.create(
            Message(
                wedding_id=household.wedding_id,
                created_by=invite.created_by,
                channel=channel,
                subject="RSVP invitation" if channel == InviteChannel.email else None,
                body=text,
                payload={"invite_id": str(invite.id), "link": link, "recipient": recipient},
                status=MessageStatus.sending,
            )
        )
        log = await self.uow.messages.add_log(
            MessageLog(
                message_id=message.id,
                guest_id=UUID(recipient["guest_id"]),
                status=MessageStatus.sending,
                details={"channel": channel.value, "contact": recipient.get("contact")},
            )
        )

        try:
            await self._post(channel, recipient["contact"], text, invite, link, household.wedding_id)
        except TransientFailure as e:
            logger.warning(
                f"Invite delivery failed: invite={invite.id} channel={channel.value} error={e}"
            )
            message.status = MessageStatus.failed
            await self.uow.messages.update(message)
            log.status = MessageStatus.failed
            log.occurred_at = utcnow()
            log.details = {**(log.details or {}), "error": str(e)}
            await self.uow.messages.update_log(log)
            return DeliveryResult(False, f"Failed to send invite: {e}")

        now = utcnow()
        message.status = MessageStatus.sent
        message.sent_at = now
        await self.uow.messages.update(message)
        log.status = MessageStatus.sent
        log.occurred_at = now
        await self.uow.messages.update_log(log)

        logger.info(f"Invite delivered: invite={invite.id} channel={channel.value}")
        return DeliveryResult(True, "Invite sent successfully.")

    def build_invite_link(self, invite: Invite) -> str:
        return f"{self.public_site_url}/site?token={invite.token}"

    async def _resolve_recipient(
        self, invite: Invite, channel: InviteChannel
    ) -> Optional[Dict[str, str]]:
        household_guests = await self.uow.guests.list_by_household(invite.household_id)

        guest: Optional[Guest] = None
        if invite.guest_id is not None:
            guest = await self.uow.guests.get_by_id(invite.guest_id)
        if guest is None and household_guests:
            # Adults first, oldest record first
            guest = household_guests[0]
        if guest is None:
            return None

        field = "email" if channel == InviteChannel.email else "phone"
        contact = getattr(guest, field) or next(
            (getattr(g, field) for g in household_guests if getattr(g, field)), None
        )
        if not contact:
            return None

        return {"guest_id": str(guest.id), "name": guest.name, "contact": contact}

    @staticmethod
    def _build_message_text(invite: Invite, link: str, name: Optional[str]) -> str:
        greeting = f"{name}, " if name else ""
        expires = (
            f" (expires on {invite.expires_at.strftime('%d/%m/%Y')})"
            if invite.expires_at
            else ""
        )
        return f"{greeting}you are invited to RSVP for our wedding. Visit: {link}{expires}"

    async def _post(self, channel, to, text, invite, link, wedding_id) -> None:
        url = self.webhook_urls.get(channel.value)
        if not url:
            raise TransientFailure(
                "DELIVERY_NOT_CONFIGURED", f"No webhook configured for channel {channel.value}"
            )

        payload = {
            "to": to,
            "message": text,
            "invite_id": str(invite.id),
            "wedding_id": str(wedding_id),
            "token": invite.token,
            "link": link,
            "channel": channel.value,
            "request_id": str(uuid4()),
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransientFailure(
                "DELIVERY_FAILED", f"Webhook returned status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise TransientFailure("DELIVERY_FAILED", str(e) or e.__class__.__name__) from e
