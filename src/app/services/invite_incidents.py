"""
Invite Incident Service

Summarizes failed invite deliveries and drives operator-triggered retries.
A retry never bypasses the lifecycle: revoked, expired or exhausted invites
are reported as blocked instead of being re-sent.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.app.services.audit_log_writer import AuditAction, AuditLogWriter
from src.app.services.delivery_channel import IDeliveryChannel
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Invite

logger = logging.getLogger(__name__)

RANGE_DAYS = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_RANGE = "30d"

RETRY_SENT = "sent"
RETRY_BLOCKED = "blocked"
RETRY_FAILED = "failed"
RETRY_NOT_FOUND = "not_found"

BLOCK_NOT_FOUND = "not found"
BLOCK_REVOKED = "revoked"
BLOCK_EXPIRED = "expired"
BLOCK_EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class RetryResult:
    ok: bool
    type: str
    message: str


def resolve_range_start(range_key: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """None means no lower bound ("all"); unknown ranges fall back to 30 days."""
    if range_key == "all":
        return None
    days = RANGE_DAYS.get(range_key or "", RANGE_DAYS[DEFAULT_RANGE])
    return (now or utcnow()) - timedelta(days=days)


def retry_block_reason(invite: Optional[Invite], now: Optional[datetime] = None) -> Optional[str]:
    if invite is None:
        return BLOCK_NOT_FOUND
    if invite.is_revoked():
        return BLOCK_REVOKED
    if invite.is_expired(now):
        return BLOCK_EXPIRED
    if invite.is_exhausted():
        return BLOCK_EXHAUSTED
    return None


def _parse_uuid(value: Optional[str]) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


class InviteIncidentService:
    def __init__(self, uow: UnitOfWork, delivery_channel: Optional[IDeliveryChannel] = None):
        self.uow = uow
        self.delivery_channel = delivery_channel
        self.audit = AuditLogWriter(uow)

    async def for_wedding(
        self,
        wedding_id: UUID,
        range_key: str = DEFAULT_RANGE,
        queue_limit: int = 20,
        sample_limit: int = 500,
    ) -> Dict[str, Any]:
        since = resolve_range_start(range_key)

        failed_messages_total = await self.uow.messages.count_failed(wedding_id, since)
        sample = await self.uow.messages.list_failed(wedding_id, since, max(1, sample_limit))

        failed = [
            (message.invite_id, message, log)
            for message, log in sample
            if message.invite_id is not None
        ]

        attempts: Dict[str, int] = {}
        channels: Dict[str, Dict[str, Any]] = {}
        for invite_id, message, _ in failed:
            attempts[invite_id] = attempts.get(invite_id, 0) + 1

            channel = getattr(message.channel, "value", message.channel) or "unknown"
            bucket = channels.setdefault(
                channel,
                {"channel": channel, "failed_messages": 0, "invites": set(), "last_failure_at": None},
            )
            bucket["failed_messages"] += 1
            bucket["invites"].add(invite_id)
            if bucket["last_failure_at"] is None or message.created_at > bucket["last_failure_at"]:
                bucket["last_failure_at"] = message.created_at

        failed_channels = sorted(
            (
                {
                    "channel": bucket["channel"],
                    "failed_messages": bucket["failed_messages"],
                    "impacted_invites": len(bucket["invites"]),
                    "last_failure_at": bucket["last_failure_at"],
                }
                for bucket in channels.values()
            ),
            key=lambda row: row["failed_messages"],
            reverse=True,
        )

        # Newest failure per invite, in sample order
        queued: Dict[str, Any] = {}
        for invite_id, message, log in failed:
            if invite_id not in queued:
                queued[invite_id] = (message, log)
            if len(queued) >= max(1, queue_limit):
                break

        invite_uuids = [u for u in (_parse_uuid(i) for i in queued) if u is not None]
        invites = {
            str(invite.id): invite
            for invite in await self.uow.invites.get_by_ids_for_wedding(invite_uuids, wedding_id)
        }

        failed_queue: List[Dict[str, Any]] = []
        for invite_id, (message, log) in queued.items():
            invite = invites.get(invite_id)
            block_reason = retry_block_reason(invite)
            household = (
                await self.uow.households.get_by_id(invite.household_id) if invite else None
            )
            guest = (
                await self.uow.guests.get_by_id(invite.guest_id)
                if invite and invite.guest_id
                else None
            )
            failed_queue.append(
                {
                    "invite_id": invite_id,
                    "household": household.name if household else None,
                    "guest": guest.name if guest else None,
                    "channel": getattr(message.channel, "value", message.channel)
                    or (getattr(invite.channel, "value", None) if invite else None)
                    or "unknown",
                    "invite_status": getattr(invite.status, "value", "unknown") if invite else "unknown",
                    "failed_at": message.created_at,
                    "error": ((log.details or {}).get("error") if log else None) or "Delivery failed",
                    "failed_attempts": attempts.get(invite_id, 1),
                    "can_retry": block_reason is None,
                    "retry_block_reason": block_reason,
                }
            )

        return {
            "failed_messages_total": failed_messages_total,
            "failed_invites_total": len(attempts),
            "failed_channels": failed_channels,
            "failed_queue": failed_queue,
        }

    async def retry_invite(
        self, invite: Invite, wedding_id: UUID, actor_id: Optional[UUID] = None
    ) -> RetryResult:
        block_reason = retry_block_reason(invite)
        if block_reason is not None:
            return RetryResult(False, RETRY_BLOCKED, block_reason)

        result = await self.delivery_channel.send(invite)

        if result.ok:
            await self.audit.record(
                wedding_id=wedding_id,
                action=AuditAction.INVITE_RETRY_SENT,
                context={"invite_id": invite.id, "channel": invite.channel},
                actor_id=actor_id,
            )
            return RetryResult(True, RETRY_SENT, "Invite re-sent successfully.")

        logger.warning(f"Invite retry failed: invite={invite.id} reason={result.message}")
        await self.audit.record(
            wedding_id=wedding_id,
            action=AuditAction.INVITE_RETRY_FAILED,
            context={
                "invite_id": invite.id,
                "channel": invite.channel,
                "error": result.message or "Retry failed",
            },
            actor_id=actor_id,
        )
        return RetryResult(False, RETRY_FAILED, result.message or "Failed to re-send invite.")

    async def retry_invite_by_id(
        self, wedding_id: UUID, invite_id: UUID, actor_id: Optional[UUID] = None
    ) -> RetryResult:
        invite = await self.uow.invites.get_for_wedding(invite_id, wedding_id)
        if invite is None:
            return RetryResult(False, RETRY_NOT_FOUND, "Invite not found for this wedding.")
        return await self.retry_invite(invite, wedding_id, actor_id)

    async def retry_failed_by_channel(
        self,
        wedding_id: UUID,
        channel: str,
        range_key: str = DEFAULT_RANGE,
        limit: int = 20,
        actor_id: Optional[UUID] = None,
    ) -> Dict[str, int]:
        limit = max(1, limit)
        incidents = await self.for_wedding(
            wedding_id, range_key, queue_limit=limit * 3, sample_limit=1000
        )
        queue = [item for item in incidents["failed_queue"] if item["channel"] == channel][:limit]

        summary = {
            "total": len(queue),
            RETRY_SENT: 0,
            RETRY_FAILED: 0,
            RETRY_BLOCKED: 0,
            RETRY_NOT_FOUND: 0,
        }
        for item in queue:
            invite_id = _parse_uuid(item["invite_id"])
            if invite_id is None:
                summary[RETRY_NOT_FOUND] += 1
                continue
            result = await self.retry_invite_by_id(wedding_id, invite_id, actor_id)
            summary[result.type] += 1

        return summary
