"""Unit tests for JoinFamilyAsMemberUseCase."""

import asyncio

import pytest

from kin.application.usecase.family.join_family_as_member import (
    JoinFamilyAsMemberRequest,
    JoinFamilyAsMemberUseCase,
)
from kin.domain.error import (
    BadRequestError,
    ConflictError,
    InviteAlreadyUsedError,
    InviteEmailMismatchError,
)
from kin.domain.repository import FamilyInviteRepository
from kin.domain.service import FamilyService, InviteService, UserService
from kin.domain.value import Role
from tests.conftest import make_family, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestJoinFamilyAsMemberUseCase:
    """Tests for JoinFamilyAsMemberUseCase."""

    @pytest.mark.asyncio
    async def test_joins_second_family_and_switches(self, unit_env):
        """Joining with make_active should move the user and reset the role."""
        # Arrange
        use_case = await unit_env.get(JoinFamilyAsMemberUseCase)
        user_service = await unit_env.get(UserService)
        alice = await make_user(unit_env)
        bob = await make_user(unit_env, email="bob@example.com", name="Bob")
        alices, _ = await make_family(unit_env, alice, name="Alice's")
        _, bob = await make_family(unit_env, bob, name="Bob's")

        # Act
        view = await use_case.execute(
            JoinFamilyAsMemberRequest(user_id=str(bob.id), invite_code=alices.invite_code)
        )

        # Assert
        assert view.family.id == str(alices.id)
        assert view.role == Role.MEMBER
        assert view.is_active
        bob = await user_service.get_by_id(bob.id)
        assert bob.active_family_id == alices.id
        assert bob.role == Role.MEMBER

    @pytest.mark.asyncio
    async def test_make_active_false_keeps_current_family(self, unit_env):
        # Arrange
        use_case = await unit_env.get(JoinFamilyAsMemberUseCase)
        user_service = await unit_env.get(UserService)
        alice = await make_user(unit_env)
        bob = await make_user(unit_env, email="bob@example.com", name="Bob")
        alices, _ = await make_family(unit_env, alice, name="Alice's")
        bobs, bob = await make_family(unit_env, bob, name="Bob's")

        # Act
        view = await use_case.execute(
            JoinFamilyAsMemberRequest(
                user_id=str(bob.id), invite_code=alices.invite_code, make_active=False
            )
        )

        # Assert
        assert not view.is_active
        bob = await user_service.get_by_id(bob.id)
        assert bob.active_family_id == bobs.id
        assert bob.role == Role.ADMIN

    @pytest.mark.asyncio
    async def test_unknown_code_is_bad_request(self, unit_env):
        use_case = await unit_env.get(JoinFamilyAsMemberUseCase)
        bob = await make_user(unit_env, email="bob@example.com", name="Bob")

        with pytest.raises(BadRequestError, match="Invalid invite code"):
            await use_case.execute(
                JoinFamilyAsMemberRequest(
                    user_id=str(bob.id), invite_code="INV-NOPE-NOPE-NOPE"
                )
            )

    @pytest.mark.asyncio
    async def test_already_member_conflicts(self, unit_env):
        use_case = await unit_env.get(JoinFamilyAsMemberUseCase)
        alice = await make_user(unit_env)
        family, _ = await make_family(unit_env, alice)

        with pytest.raises(ConflictError, match="already a member of this family"):
            await use_case.execute(
                JoinFamilyAsMemberRequest(
                    user_id=str(alice.id), invite_code=family.invite_code
                )
            )

    @pytest.mark.asyncio
    async def test_email_bound_invite_checks_recipient(self, unit_env):
        # Arrange
        use_case = await unit_env.get(JoinFamilyAsMemberUseCase)
        invite_service = await unit_env.get(InviteService)
        alice = await make_user(unit_env)
        family, _ = await make_family(unit_env, alice)
        _, code = await invite_service.create_email_bound_invite(
            family.id, alice.id, "bob@example.com"
        )
        carol = await make_user(unit_env, email="carol@example.com", name="Carol")

        # Act & Assert
        with pytest.raises(InviteEmailMismatchError):
            await use_case.execute(
                JoinFamilyAsMemberRequest(user_id=str(carol.id), invite_code=code)
            )

    @pytest.mark.asyncio
    async def test_email_bound_invite_redeemed_once_under_race(
        self, unit_env, monkeypatch
    ):
        """Concurrent joins on one invite: one membership, the rest already used."""
        # Arrange
        use_case = await unit_env.get(JoinFamilyAsMemberUseCase)
        invite_service = await unit_env.get(InviteService)
        family_service = await unit_env.get(FamilyService)
        repo = await unit_env.get(FamilyInviteRepository)
        alice = await make_user(unit_env)
        family, _ = await make_family(unit_env, alice)
        bob = await make_user(unit_env, email="bob@example.com", name="Bob")
        _, code = await invite_service.create_email_bound_invite(
            family.id, alice.id, "bob@example.com"
        )
        find_by_code_hash = repo.find_by_code_hash

        async def slow_find_by_code_hash(code_hash):
            invite = await find_by_code_hash(code_hash)
            await asyncio.sleep(0)
            return invite

        monkeypatch.setattr(repo, "find_by_code_hash", slow_find_by_code_hash)
        request = JoinFamilyAsMemberRequest(user_id=str(bob.id), invite_code=code)

        # Act
        results = await asyncio.gather(
            *(use_case.execute(request) for _ in range(3)), return_exceptions=True
        )

        # Assert
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 2
        assert all(isinstance(f, InviteAlreadyUsedError) for f in failures)
        assert len(await family_service.list_members(family.id)) == 2
