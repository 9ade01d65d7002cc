"""Unit tests for GetCurrentUserUseCase."""

import pytest

from kin.application.usecase.auth.get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserUseCase,
)
from kin.domain.error import UnauthorizedError
from kin.domain.model.common import utc_now
from kin.domain.service import UserService
from kin.domain.value import Role
from tests.conftest import add_member, make_family, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestGetCurrentUserUseCase:
    """Tests for GetCurrentUserUseCase."""

    @pytest.mark.asyncio
    async def test_lists_memberships_and_active_family(self, unit_env):
        # Arrange
        use_case = await unit_env.get(GetCurrentUserUseCase)
        alice = await make_user(unit_env)
        bob = await make_user(unit_env, email="bob@example.com", name="Bob")
        own, alice = await make_family(unit_env, alice, name="Alice's")
        bobs, _ = await make_family(unit_env, bob, name="Bob's")
        await add_member(unit_env, bobs, alice, make_active=False)

        # Act
        response = await use_case.execute(GetCurrentUserRequest(user_id=str(alice.id)))

        # Assert
        assert response.user.role == Role.ADMIN
        assert response.active_family is not None
        assert response.active_family.id == str(own.id)
        by_family = {m.family.id: m for m in response.memberships}
        assert by_family[str(own.id)].is_active
        assert by_family[str(own.id)].role == Role.ADMIN
        assert not by_family[str(bobs.id)].is_active
        assert by_family[str(bobs.id)].role == Role.MEMBER

    @pytest.mark.asyncio
    async def test_deleted_user_is_unauthorized(self, unit_env):
        """A session for a deleted account should stop working."""
        # Arrange
        use_case = await unit_env.get(GetCurrentUserUseCase)
        user_service = await unit_env.get(UserService)
        user = await make_user(unit_env)
        await user_service.update(user, deleted_at=utc_now())

        # Act & Assert
        with pytest.raises(UnauthorizedError, match="User not found"):
            await use_case.execute(GetCurrentUserRequest(user_id=str(user.id)))

    @pytest.mark.asyncio
    async def test_malformed_session_id_is_unauthorized(self, unit_env):
        use_case = await unit_env.get(GetCurrentUserUseCase)

        with pytest.raises(UnauthorizedError):
            await use_case.execute(GetCurrentUserRequest(user_id="not-a-uuid"))
