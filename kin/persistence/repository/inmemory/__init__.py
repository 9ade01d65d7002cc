"""In-memory repository implementations for testing."""

from .channel import InMemoryChannelRepository
from .database import InMemoryDatabase, InMemoryUnitOfWork
from .family import InMemoryFamilyRepository, InMemoryMembershipRepository
from .invite import InMemoryFamilyInviteRepository, InMemoryInviteRepository
from .user import InMemoryUserRepository
from .verification_token import InMemoryVerificationTokenRepository

__all__ = [
    "InMemoryDatabase",
    "InMemoryUnitOfWork",
    "InMemoryUserRepository",
    "InMemoryFamilyRepository",
    "InMemoryMembershipRepository",
    "InMemoryInviteRepository",
    "InMemoryFamilyInviteRepository",
    "InMemoryVerificationTokenRepository",
    "InMemoryChannelRepository",
]
