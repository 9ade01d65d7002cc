"""Email verification token repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from kin.domain.model import EmailVerificationToken
from kin.domain.value import UserId, VerificationTokenId


class VerificationTokenRepository(ABC):
    """Repository for EmailVerificationToken entities."""

    @abstractmethod
    async def find_by_hash(self, token_hash: str) -> EmailVerificationToken | None:
        """Find a token by its SHA-256 hash.

        Args:
            token_hash: Hash of the plaintext token

        Returns:
            The token if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, token: EmailVerificationToken) -> EmailVerificationToken:
        """Save a token."""
        pass

    @abstractmethod
    async def mark_used(self, token_id: VerificationTokenId, at: datetime) -> bool:
        """Set ``used_at`` if not already set.

        Returns:
            True if this call consumed the token
        """
        pass

    @abstractmethod
    async def invalidate_unused_for_user(self, user_id: UserId, at: datetime) -> int:
        """Mark every unused token of a user as used.

        Returns:
            Number of tokens invalidated
        """
        pass
