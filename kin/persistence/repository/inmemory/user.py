"""In-memory user repository for testing."""

from typing import Optional

from kin.domain.error import ConflictError
from kin.domain.model import User
from kin.domain.repository import UserRepository
from kin.domain.value import UserId

from .database import InMemoryDatabase


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        return self.db.users.get(user_id)

    async def find_active_by_email(self, email: str) -> Optional[User]:
        needle = email.strip().lower()
        for user in self.db.users.values():
            if user.email.lower() == needle and not user.is_deleted:
                return user
        return None

    async def find_by_ids(self, user_ids: list[UserId]) -> list[User]:
        return [self.db.users[uid] for uid in user_ids if uid in self.db.users]

    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Raises:
            ConflictError: If another live account uses the email
        """
        if not user.is_deleted:
            other = await self.find_active_by_email(user.email)
            if other and other.id != user.id:
                raise ConflictError("Email already registered")
        self.db.users[user.id] = user
        return user
