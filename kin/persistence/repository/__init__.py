"""PostgreSQL repository implementations."""

from kin.persistence.repository.channel import PostgresChannelRepository
from kin.persistence.repository.family import (
    PostgresFamilyRepository,
    PostgresMembershipRepository,
)
from kin.persistence.repository.invite import (
    PostgresFamilyInviteRepository,
    PostgresInviteRepository,
)
from kin.persistence.repository.user import PostgresUserRepository
from kin.persistence.repository.verification_token import (
    PostgresVerificationTokenRepository,
)

__all__ = [
    "PostgresUserRepository",
    "PostgresFamilyRepository",
    "PostgresMembershipRepository",
    "PostgresInviteRepository",
    "PostgresFamilyInviteRepository",
    "PostgresVerificationTokenRepository",
    "PostgresChannelRepository",
]
