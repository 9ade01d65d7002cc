"""Test configuration and fixtures."""

import os

# Settings are read from the environment when the container builds them
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault(
    "INVITES__SECRET",
    "5f0c2a9e8b7d6c5b4a39281706f5e4d3c2b1a0f9e8d7c6b5a4938271605f4e3d",
)
os.environ.setdefault("AUTH__BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTH__JWT_SECRET", "test-access-secret")
os.environ.setdefault("AUTH__REFRESH_TOKEN_SECRET", "test-refresh-secret")

import logfire  # noqa: E402
from dishka import AsyncContainer  # noqa: E402

from kin.domain.model import Family, User  # noqa: E402
from kin.domain.service import FamilyService, UserService  # noqa: E402

logfire.configure(send_to_logfire=False, console=False)

# base64 of bytes 0..31
PUBLIC_KEY = "AAECAwQFBgcICQoLDA0ODxAREhMUFRYXGBkaGxwdHh8="
PASSWORD = "correct-horse-battery"


async def make_user(
    container: AsyncContainer,
    email: str = "alice@example.com",
    name: str = "Alice",
    verified: bool = True,
    public_key: str | None = PUBLIC_KEY,
) -> User:
    """Helper to create a user, verified by default."""
    user_service = await container.get(UserService)
    password_hash = await user_service.hash_password(PASSWORD)
    user = await user_service.create_user(
        email=email, name=name, password_hash=password_hash, public_key=public_key
    )
    if verified:
        user = await user_service.mark_verified(user)
    return user


async def make_family(
    container: AsyncContainer, creator: User, name: str = "The Smiths"
) -> tuple[Family, User]:
    """Helper to create a family with ``creator`` as its admin."""
    family_service = await container.get(FamilyService)
    invite_code = await family_service.allocate_invite_code()
    return await family_service.create_family(creator, name, invite_code)


async def add_member(
    container: AsyncContainer, family: Family, user: User, make_active: bool = True
) -> User:
    """Helper to add ``user`` to ``family`` as a MEMBER."""
    family_service = await container.get(FamilyService)
    user_service = await container.get(UserService)
    await family_service.add_member(family.id, user.id)
    if make_active:
        user = await user_service.update(user, active_family_id=family.id)
    return user
