"""Email verification domain service."""

from datetime import timedelta
from uuid import uuid4

import logfire

from kin.domain.error import BadRequestError
from kin.domain.model import EmailVerificationToken
from kin.domain.model.common import utc_now
from kin.domain.repository import VerificationTokenRepository
from kin.domain.value import UserId, VerificationTokenId
from kin.util.crypto import generate_token, hash_value

from .base import Service


class VerificationService(Service):
    """Issues and consumes single-use email verification tokens."""

    def __init__(
        self, token_repository: VerificationTokenRepository, expiry_hours: int = 24
    ) -> None:
        """Initialize verification service.

        Args:
            token_repository: Verification token repository
            expiry_hours: Token lifetime
        """
        self.token_repository = token_repository
        self.expiry = timedelta(hours=expiry_hours)

    async def issue(
        self,
        user_id: UserId,
        pending_invite_code: str | None = None,
        invalidate_previous: bool = False,
    ) -> str:
        """Create a verification token for a user.

        Args:
            user_id: Account to verify
            pending_invite_code: Invite code to redeem once verified
            invalidate_previous: Mark the user's unused tokens as used first

        Returns:
            Plaintext token for the verification link. Only its hash is stored.
        """
        with logfire.span("verification_service.issue", user_id=str(user_id)):
            now = utc_now()
            if invalidate_previous:
                invalidated = await self.token_repository.invalidate_unused_for_user(
                    user_id, now
                )
                logfire.info("Previous tokens invalidated", count=invalidated)

            token = generate_token()
            await self.token_repository.save(
                EmailVerificationToken(
                    id=VerificationTokenId(uuid4()),
                    user_id=user_id,
                    token_hash=hash_value(token),
                    expires_at=now + self.expiry,
                    pending_invite_code=pending_invite_code,
                    created_at=now,
                )
            )
            logfire.info("Verification token issued", user_id=str(user_id))
            return token

    async def consume(self, token: str) -> EmailVerificationToken:
        """Consume a verification token.

        Args:
            token: Plaintext token from the verification link

        Returns:
            The consumed token record

        Raises:
            BadRequestError: If the token is unknown, expired or already used
        """
        with logfire.span("verification_service.consume"):
            record = await self.token_repository.find_by_hash(hash_value(token))
            if not record:
                logfire.warn("Verification token not found")
                raise BadRequestError("Invalid verification token")

            now = utc_now()
            if record.is_used:
                raise BadRequestError("This verification link has already been used")
            if record.is_expired(now):
                raise BadRequestError("This verification link has expired")

            if not await self.token_repository.mark_used(record.id, now):
                logfire.warn("Verification token consumed concurrently")
                raise BadRequestError("This verification link has already been used")

            logfire.info("Verification token consumed", user_id=str(record.user_id))
            return record.model_copy(update={"used_at": now})
