"""Email verification token entity."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from kin.domain.model.common import DomainModel, utc_now
from kin.domain.value import UserId, VerificationTokenId


class EmailVerificationToken(DomainModel):
    """Single-use token proving control of an email address.

    Only the SHA-256 hash of the token is stored; the plaintext goes out by
    email and is never persisted.
    """

    id: VerificationTokenId
    user_id: UserId
    token_hash: str
    expires_at: datetime
    used_at: Optional[datetime] = None
    pending_invite_code: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_used(self) -> bool:
        return self.used_at is not None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
