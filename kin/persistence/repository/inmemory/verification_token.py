"""In-memory verification token repository for testing."""

from datetime import datetime
from typing import Optional

from kin.domain.model import EmailVerificationToken
from kin.domain.repository import VerificationTokenRepository
from kin.domain.value import UserId, VerificationTokenId

from .database import InMemoryDatabase


class InMemoryVerificationTokenRepository(VerificationTokenRepository):
    """In-memory implementation of VerificationTokenRepository for testing."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db

    async def find_by_hash(self, token_hash: str) -> Optional[EmailVerificationToken]:
        for token in self.db.verification_tokens.values():
            if token.token_hash == token_hash:
                return token
        return None

    async def save(self, token: EmailVerificationToken) -> EmailVerificationToken:
        self.db.verification_tokens[token.id] = token
        return token

    async def mark_used(self, token_id: VerificationTokenId, at: datetime) -> bool:
        token = self.db.verification_tokens.get(token_id)
        if not token or token.used_at is not None:
            return False
        self.db.verification_tokens[token_id] = token.model_copy(update={"used_at": at})
        return True

    async def invalidate_unused_for_user(self, user_id: UserId, at: datetime) -> int:
        count = 0
        for token_id, token in list(self.db.verification_tokens.items()):
            if token.user_id == user_id and token.used_at is None:
                self.db.verification_tokens[token_id] = token.model_copy(
                    update={"used_at": at}
                )
                count += 1
        return count
