"""
Incident Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.app.use_cases.events.dtos import TimelineEntryResponse


class FailedChannel(BaseModel):
    channel: str
    failed_messages: int
    impacted_invites: int
    last_failure_at: Optional[datetime] = None


class FailedInvite(BaseModel):
    invite_id: str
    household: Optional[str] = None
    guest: Optional[str] = None
    channel: str
    invite_status: str
    failed_at: Optional[datetime] = None
    error: str
    failed_attempts: int
    can_retry: bool
    retry_block_reason: Optional[str] = None


class InviteIncidentsResponse(BaseModel):
    failed_messages_total: int
    failed_invites_total: int
    failed_channels: List[FailedChannel]
    failed_queue: List[FailedInvite]


class RetryInviteResponse(BaseModel):
    ok: bool
    type: str
    message: str


class RetryChannelResponse(BaseModel):
    total: int
    sent: int
    failed: int
    blocked: int
    not_found: int


class InviteTimelineResponse(BaseModel):
    invite_id: str
    events: List[TimelineEntryResponse]
    text: Optional[str] = None
