"""Repository interfaces for Kin domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from kin.domain.repository.channel import ChannelRepository
from kin.domain.repository.family import FamilyRepository, MembershipRepository
from kin.domain.repository.invite import FamilyInviteRepository, InviteRepository
from kin.domain.repository.unit_of_work import UnitOfWork
from kin.domain.repository.user import UserRepository
from kin.domain.repository.verification_token import VerificationTokenRepository

__all__ = [
    "UserRepository",
    "FamilyRepository",
    "MembershipRepository",
    "InviteRepository",
    "FamilyInviteRepository",
    "VerificationTokenRepository",
    "ChannelRepository",
    "UnitOfWork",
]
