"""Domain model entities for Kin."""

from kin.domain.model.channel import Channel
from kin.domain.model.family import Family, FamilyMembership
from kin.domain.model.invite import (
    AnyInvite,
    EmailBoundInvite,
    EncryptedInvite,
    LegacyInvite,
    RedeemableInvite,
)
from kin.domain.model.user import User, author_display_name
from kin.domain.model.verification_token import EmailVerificationToken

__all__ = [
    "User",
    "Family",
    "FamilyMembership",
    "Channel",
    "EmailVerificationToken",
    "AnyInvite",
    "RedeemableInvite",
    "LegacyInvite",
    "EncryptedInvite",
    "EmailBoundInvite",
    "author_display_name",
]
