"""User domain service."""

import asyncio
from uuid import uuid4

import logfire

from kin.domain.error import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
)
from kin.domain.model import User, author_display_name
from kin.domain.model.common import utc_now
from kin.domain.repository import UserRepository
from kin.domain.value import FamilyId, Role, UserId
from kin.util.password import (
    MAX_PASSWORD_BYTES,
    hash_password,
    password_fits,
    verify_password,
)

from .base import Service


class UserService(Service):
    """Domain service for user accounts."""

    def __init__(self, user_repository: UserRepository, password_rounds: int = 10) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            password_rounds: bcrypt cost factor for new password hashes
        """
        self.user_repository = user_repository
        self.password_rounds = password_rounds

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID, including soft-deleted users.

        Args:
            user_id: User ID

        Returns:
            User entity

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def get_active(self, user_id: UserId) -> User:
        """Get a non-deleted user by ID.

        Raises:
            NotFoundError: If the user is missing or soft-deleted
        """
        user = await self.get_by_id(user_id)
        if user.is_deleted:
            logfire.warn("User is deleted", user_id=str(user_id))
            raise NotFoundError("User", str(user_id))
        return user

    async def find_active_by_email(self, email: str) -> User | None:
        """Find a non-deleted user by email (case-insensitive)."""
        with logfire.span("user_service.find_active_by_email"):
            return await self.user_repository.find_active_by_email(email)

    async def ensure_email_available(self, email: str) -> None:
        """Raise if a non-deleted account already uses ``email``.

        Raises:
            ConflictError: If the email is registered
        """
        if await self.user_repository.find_active_by_email(email):
            logfire.warn("Email already registered")
            raise ConflictError("Email already registered")

    async def hash_password(self, password: str) -> str:
        """Hash a new password off the event loop.

        Call before opening a unit of work; bcrypt is slow on purpose.

        Raises:
            BadRequestError: If the password is longer than bcrypt accepts
        """
        if not password_fits(password):
            raise BadRequestError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
            )
        return await asyncio.to_thread(hash_password, password, self.password_rounds)

    async def create_user(
        self,
        email: str,
        name: str,
        password_hash: str,
        public_key: str | None,
        role: Role = Role.MEMBER,
        active_family_id: FamilyId | None = None,
        user_id: UserId | None = None,
    ) -> User:
        """Create an unverified user account.

        Args:
            email: Email address, stored as given
            name: Display name
            password_hash: Result of ``hash_password``
            public_key: Validated public key
            role: Role in the active family
            active_family_id: Family to activate, if joining one
            user_id: Pre-allocated ID, when another write must reference the
                user before it exists

        Returns:
            Saved user
        """
        with logfire.span("user_service.create_user", role=role.value):
            user = User(
                id=user_id or UserId(uuid4()),
                email=email,
                name=name,
                password_hash=password_hash,
                public_key=public_key,
                role=role,
                active_family_id=active_family_id,
            )
            saved = await self.user_repository.save(user)
            logfire.info("User created", user_id=str(saved.id))
            return saved

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials.

        Missing accounts, soft-deleted accounts and wrong passwords all
        produce the same failure.

        Args:
            email: Email address
            password: Plaintext password

        Returns:
            The authenticated user

        Raises:
            UnauthorizedError: If the credentials are invalid
        """
        with logfire.span("user_service.authenticate"):
            user = await self.user_repository.find_active_by_email(email)
            if not user or not await asyncio.to_thread(
                verify_password, password, user.password_hash
            ):
                logfire.warn("Invalid credentials")
                raise UnauthorizedError("Invalid credentials")
            return user

    async def update(self, user: User, **changes) -> User:
        """Apply field changes to a user and persist them.

        Args:
            user: Current user state
            **changes: Field updates

        Returns:
            Saved user
        """
        updated = user.model_copy(update={**changes, "updated_at": utc_now()})
        return await self.user_repository.save(updated)

    async def mark_verified(self, user: User) -> User:
        """Mark the user's email address as verified."""
        with logfire.span("user_service.mark_verified", user_id=str(user.id)):
            now = utc_now()
            return await self.update(user, email_verified=True, email_verified_at=now)

    async def get_public_key(self, email: str) -> str | None:
        """Look up the public key of an active user by email.

        Returns:
            The public key, or None for unknown or deleted accounts
        """
        with logfire.span("user_service.get_public_key"):
            user = await self.user_repository.find_active_by_email(email)
            return user.public_key if user else None

    async def get_display_names(self, user_ids: list[UserId]) -> dict[UserId, str]:
        """Resolve author display names for rendering.

        Deleted or unknown users map to the removed-user placeholder.

        Args:
            user_ids: Author IDs

        Returns:
            Mapping of every requested ID to a display name
        """
        with logfire.span("user_service.get_display_names", count=len(user_ids)):
            users = {u.id: u for u in await self.user_repository.find_by_ids(user_ids)}
            return {uid: author_display_name(users.get(uid)) for uid in user_ids}

    async def get_active_users(self, user_ids: list[UserId]) -> dict[UserId, User]:
        """Load non-deleted users by ID; missing and deleted ones are left out."""
        users = await self.user_repository.find_by_ids(user_ids)
        return {u.id: u for u in users if not u.is_deleted}
