"""Invite repository interfaces.

Redemption transitions are conditional updates: they only apply while the
row is still redeemable and report whether they did. A False result means a
concurrent redemption won.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from kin.domain.model import EmailBoundInvite, EncryptedInvite
from kin.domain.value import FamilyId, FamilyInviteId, InviteId, UserId


class InviteRepository(ABC):
    """Repository for legacy/encrypted invites."""

    @abstractmethod
    async def find_by_id(self, invite_id: InviteId) -> EncryptedInvite | None:
        """Find an invite by ID."""
        pass

    @abstractmethod
    async def find_by_code(self, invite_code: str) -> EncryptedInvite | None:
        """Find an invite by its code.

        Args:
            invite_code: Exact invite code

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_open_for_email(
        self, family_id: FamilyId, invitee_email: str
    ) -> EncryptedInvite | None:
        """Find the PENDING or PENDING_REGISTRATION invite for (family, email).

        Args:
            family_id: Family the invite is for
            invitee_email: Invitee email, compared case-insensitively

        Returns:
            The open invite if any
        """
        pass

    @abstractmethod
    async def list_pending_for_email(
        self, invitee_email: str, now: datetime
    ) -> list[EncryptedInvite]:
        """List PENDING, unexpired invites addressed to an email."""
        pass

    @abstractmethod
    async def list_by_family(self, family_id: FamilyId) -> list[EncryptedInvite]:
        """List all invites of a family, newest first."""
        pass

    @abstractmethod
    async def save(self, invite: EncryptedInvite) -> EncryptedInvite:
        """Save an invite (create or update).

        Raises:
            ConflictError: If the invite code is already taken
        """
        pass

    @abstractmethod
    async def mark_accepted(self, invite_id: InviteId, at: datetime) -> bool:
        """Transition PENDING -> ACCEPTED.

        Args:
            invite_id: Invite to accept
            at: Acceptance time

        Returns:
            True if this call performed the transition
        """
        pass

    @abstractmethod
    async def mark_expired(self, invite_id: InviteId, at: datetime) -> bool:
        """Transition an open invite (PENDING or PENDING_REGISTRATION) -> EXPIRED.

        Returns:
            True if this call performed the transition
        """
        pass

    @abstractmethod
    async def revoke_open_for_email(
        self, invitee_email: str, at: datetime, family_id: FamilyId | None = None
    ) -> int:
        """Revoke open invites addressed to an email.

        Args:
            invitee_email: Invitee email, compared case-insensitively
            at: Revocation time
            family_id: Restrict to one family; all families when None

        Returns:
            Number of invites revoked
        """
        pass


class FamilyInviteRepository(ABC):
    """Repository for email-bound invites."""

    @abstractmethod
    async def find_by_code_hash(self, code_hash: str) -> EmailBoundInvite | None:
        """Find an email-bound invite by the hash of its code.

        Args:
            code_hash: SHA-256 hex of the plaintext code

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_family(self, family_id: FamilyId) -> list[EmailBoundInvite]:
        """List all email-bound invites of a family, newest first."""
        pass

    @abstractmethod
    async def save(self, invite: EmailBoundInvite) -> EmailBoundInvite:
        """Save an email-bound invite."""
        pass

    @abstractmethod
    async def mark_redeemed(
        self, invite_id: FamilyInviteId, user_id: UserId, at: datetime
    ) -> bool:
        """Set the redemption marker if not already set.

        Args:
            invite_id: Invite to redeem
            user_id: Redeeming user
            at: Redemption time

        Returns:
            True if this call redeemed the invite
        """
        pass
