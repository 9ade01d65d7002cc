"""Domain value objects for Kin."""

from kin.domain.value.identifiers import (
    ChannelId,
    FamilyId,
    FamilyInviteId,
    InviteId,
    MembershipId,
    UserId,
    VerificationTokenId,
)
from kin.domain.value.types import (
    OPEN_INVITE_STATUSES,
    SUPPORTED_LANGUAGES,
    EmailAddress,
    InviteStatus,
    Language,
    PublicKey,
    Role,
)

__all__ = [
    # Identifiers
    "UserId",
    "FamilyId",
    "MembershipId",
    "InviteId",
    "FamilyInviteId",
    "VerificationTokenId",
    "ChannelId",
    # Types
    "Role",
    "InviteStatus",
    "OPEN_INVITE_STATUSES",
    "SUPPORTED_LANGUAGES",
    "EmailAddress",
    "PublicKey",
    "Language",
]
