"""User repository interface."""

from abc import ABC, abstractmethod

from kin.domain.model import User
from kin.domain.value import UserId


class UserRepository(ABC):
    """Repository for User aggregate.

    Defines the contract for user persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> User | None:
        """Find a user by ID, including soft-deleted users.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_active_by_email(self, email: str) -> User | None:
        """Find a non-deleted user by email, case-insensitively.

        Soft-deleted accounts are never returned, so they look the same as
        accounts that never existed.

        Args:
            email: Email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, user_ids: list[UserId]) -> list[User]:
        """Find users by IDs, including soft-deleted users.

        Args:
            user_ids: User IDs to look up

        Returns:
            Users found, in no particular order
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass
