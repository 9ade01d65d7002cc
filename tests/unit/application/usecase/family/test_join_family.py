"""Unit tests for JoinFamilyUseCase."""

import asyncio
from datetime import timedelta

import pytest

from kin.adapter.email import RecordingNotifier
from kin.application.usecase.family.join_family import (
    JoinFamilyRequest,
    JoinFamilyUseCase,
)
from kin.domain.error import (
    BadRequestError,
    ConflictError,
    InviteAlreadyUsedError,
    InviteEmailMismatchError,
    InviteExpiredError,
    UnauthorizedError,
)
from kin.domain.model.common import utc_now
from kin.domain.repository import FamilyInviteRepository, FamilyRepository
from kin.domain.service import FamilyService, InviteService, UserService
from kin.domain.value import Role
from kin.persistence.repository.inmemory import InMemoryDatabase
from kin.util.crypto import hash_value
from tests.conftest import PASSWORD, PUBLIC_KEY, make_family, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


def _request(invite_code: str, email: str = "bob@example.com") -> JoinFamilyRequest:
    return JoinFamilyRequest(
        email=email,
        password=PASSWORD,
        name="Bob",
        invite_code=invite_code,
        public_key=PUBLIC_KEY,
    )


class TestJoinWithLegacyCode:
    """Joining through the family's shared code."""

    @pytest.mark.asyncio
    async def test_creates_member_and_sends_verification(self, unit_env):
        # Arrange
        use_case = await unit_env.get(JoinFamilyUseCase)
        family_service = await unit_env.get(FamilyService)
        user_service = await unit_env.get(UserService)
        notifier = await unit_env.get(RecordingNotifier)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)

        # Act
        response = await use_case.execute(_request(family.invite_code))

        # Assert
        assert response.requires_email_verification
        bob = await user_service.find_active_by_email("bob@example.com")
        assert not bob.email_verified
        assert bob.role == Role.MEMBER
        assert bob.active_family_id == family.id
        membership = await family_service.get_membership(bob.id, family.id)
        assert membership.role == Role.MEMBER
        assert len(notifier.sent_to("bob@example.com", "verification")) == 1

    @pytest.mark.asyncio
    async def test_legacy_code_is_multi_use(self, unit_env):
        # Arrange
        use_case = await unit_env.get(JoinFamilyUseCase)
        family_service = await unit_env.get(FamilyService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)

        # Act
        await use_case.execute(_request(family.invite_code, "bob@example.com"))
        await use_case.execute(_request(family.invite_code, "carol@example.com"))

        # Assert
        assert len(await family_service.list_members(family.id)) == 3

    @pytest.mark.asyncio
    async def test_unknown_code_is_unauthorized(self, unit_env):
        use_case = await unit_env.get(JoinFamilyUseCase)

        with pytest.raises(UnauthorizedError, match="Invalid invite code"):
            await use_case.execute(_request("INV-NOPE-NOPE-NOPE"))

    @pytest.mark.asyncio
    async def test_full_family_rejected_without_creating_user(self, unit_env):
        """A full family should leave no account behind."""
        # Arrange
        use_case = await unit_env.get(JoinFamilyUseCase)
        family_repo = await unit_env.get(FamilyRepository)
        user_service = await unit_env.get(UserService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        await family_repo.save(family.model_copy(update={"max_members": 1}))

        # Act & Assert
        with pytest.raises(ConflictError, match="Family is full"):
            await use_case.execute(_request(family.invite_code))
        assert await user_service.find_active_by_email("bob@example.com") is None

    @pytest.mark.asyncio
    async def test_registered_email_conflicts(self, unit_env):
        use_case = await unit_env.get(JoinFamilyUseCase)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)

        with pytest.raises(ConflictError, match="Email already registered"):
            await use_case.execute(_request(family.invite_code, "alice@example.com"))


class TestJoinWithEmailBoundCode:
    """Joining through a single-use email-bound invite."""

    @pytest.mark.asyncio
    async def test_redeems_invite(self, unit_env):
        # Arrange
        use_case = await unit_env.get(JoinFamilyUseCase)
        invite_service = await unit_env.get(InviteService)
        repo = await unit_env.get(FamilyInviteRepository)
        user_service = await unit_env.get(UserService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        _, code = await invite_service.create_email_bound_invite(
            family.id, admin.id, "bob@example.com"
        )

        # Act
        await use_case.execute(_request(code, "Bob@Example.com"))

        # Assert
        bob = await user_service.find_active_by_email("bob@example.com")
        stored = await repo.find_by_code_hash(hash_value(code))
        assert stored.redeemed_at is not None
        assert stored.redeemed_by_user_id == bob.id

    @pytest.mark.asyncio
    async def test_second_redemption_rejected(self, unit_env):
        # Arrange
        use_case = await unit_env.get(JoinFamilyUseCase)
        invite_service = await unit_env.get(InviteService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        _, code = await invite_service.create_email_bound_invite(
            family.id, admin.id, "bob@example.com"
        )
        await use_case.execute(_request(code))

        # Act & Assert
        with pytest.raises(InviteAlreadyUsedError):
            await use_case.execute(_request(code))

    @pytest.mark.asyncio
    async def test_other_email_rejected(self, unit_env):
        # Arrange
        use_case = await unit_env.get(JoinFamilyUseCase)
        invite_service = await unit_env.get(InviteService)
        user_service = await unit_env.get(UserService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        _, code = await invite_service.create_email_bound_invite(
            family.id, admin.id, "bob@example.com"
        )

        # Act & Assert
        with pytest.raises(InviteEmailMismatchError):
            await use_case.execute(_request(code, "mallory@example.com"))
        assert await user_service.find_active_by_email("mallory@example.com") is None

    @pytest.mark.asyncio
    async def test_expired_invite_rejected(self, unit_env):
        # Arrange
        use_case = await unit_env.get(JoinFamilyUseCase)
        invite_service = await unit_env.get(InviteService)
        repo = await unit_env.get(FamilyInviteRepository)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        invite, code = await invite_service.create_email_bound_invite(
            family.id, admin.id, "bob@example.com"
        )
        await repo.save(
            invite.model_copy(update={"expires_at": utc_now() - timedelta(minutes=1)})
        )

        # Act & Assert
        with pytest.raises(InviteExpiredError):
            await use_case.execute(_request(code))

    @pytest.mark.asyncio
    async def test_exactly_one_concurrent_redemption_wins(self, unit_env, monkeypatch):
        """Racing sign-ups on one invite: one joins, the rest see it as used."""
        # Arrange
        use_case = await unit_env.get(JoinFamilyUseCase)
        invite_service = await unit_env.get(InviteService)
        family_service = await unit_env.get(FamilyService)
        repo = await unit_env.get(FamilyInviteRepository)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        _, code = await invite_service.create_email_bound_invite(
            family.id, admin.id, "bob@example.com"
        )
        find_by_code_hash = repo.find_by_code_hash

        async def slow_find_by_code_hash(code_hash):
            invite = await find_by_code_hash(code_hash)
            await asyncio.sleep(0)
            return invite

        monkeypatch.setattr(repo, "find_by_code_hash", slow_find_by_code_hash)

        # Act
        results = await asyncio.gather(
            *(use_case.execute(_request(code)) for _ in range(3)),
            return_exceptions=True,
        )

        # Assert
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 2
        assert all(isinstance(f, InviteAlreadyUsedError) for f in failures)
        assert len(await family_service.list_members(family.id)) == 2


class TestJoinPassword:
    """Password handling on sign-up."""

    @pytest.mark.asyncio
    async def test_password_over_bcrypt_limit_rejected(self, unit_env):
        # Arrange
        use_case = await unit_env.get(JoinFamilyUseCase)
        user_service = await unit_env.get(UserService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        request = _request(family.invite_code).model_copy(
            update={"password": "x" * 80}
        )

        # Act & Assert
        with pytest.raises(BadRequestError, match="at most 72 bytes"):
            await use_case.execute(request)
        assert await user_service.find_active_by_email("bob@example.com") is None

    @pytest.mark.asyncio
    async def test_password_hashed_outside_unit_of_work(self, unit_env, monkeypatch):
        """The write lock should not be held while bcrypt runs."""
        # Arrange
        use_case = await unit_env.get(JoinFamilyUseCase)
        user_service = await unit_env.get(UserService)
        db = await unit_env.get(InMemoryDatabase)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        lock_held = []
        hash_password = user_service.hash_password

        async def checked_hash_password(password):
            lock_held.append(db.lock.locked())
            return await hash_password(password)

        monkeypatch.setattr(user_service, "hash_password", checked_hash_password)

        # Act
        await use_case.execute(_request(family.invite_code))

        # Assert
        assert lock_held == [False]
