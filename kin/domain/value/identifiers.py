"""Strongly typed identifiers for Kin domain entities."""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
FamilyId = NewType("FamilyId", UUID)
MembershipId = NewType("MembershipId", UUID)
InviteId = NewType("InviteId", UUID)
FamilyInviteId = NewType("FamilyInviteId", UUID)
VerificationTokenId = NewType("VerificationTokenId", UUID)
ChannelId = NewType("ChannelId", UUID)
