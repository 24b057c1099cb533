"""
Invite Lifecycle Use Cases

Create, reissue and revoke invites, singly or in bulk.
"""

from .bulk_invite_actions_use_case import BulkReissueInvitesUseCase, BulkRevokeInvitesUseCase
from .create_invite_use_case import CreateInviteUseCase
from .dtos import BulkReissueResponse, BulkRevokeResponse, DeliveryInfo, InviteResponse
from .reissue_invite_use_case import ReissueInviteUseCase
from .revoke_invite_use_case import RevokeInviteUseCase

__all__ = [
    "CreateInviteUseCase",
    "ReissueInviteUseCase",
    "RevokeInviteUseCase",
    "BulkReissueInvitesUseCase",
    "BulkRevokeInvitesUseCase",
    "InviteResponse",
    "DeliveryInfo",
    "BulkReissueResponse",
    "BulkRevokeResponse",
]
