"""Unit tests for SwitchActiveFamilyUseCase."""

import pytest

from kin.application.usecase.family.switch_active_family import (
    SwitchActiveFamilyRequest,
    SwitchActiveFamilyUseCase,
)
from kin.domain.error import ForbiddenError
from kin.domain.service import JWTService
from kin.domain.value import Role
from tests.conftest import add_member, make_family, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestSwitchActiveFamilyUseCase:
    """Tests for SwitchActiveFamilyUseCase."""

    @pytest.mark.asyncio
    async def test_role_follows_new_active_family(self, unit_env):
        # Arrange
        use_case = await unit_env.get(SwitchActiveFamilyUseCase)
        jwt_service = await unit_env.get(JWTService)
        alice = await make_user(unit_env)
        bob = await make_user(unit_env, email="bob@example.com", name="Bob")
        _, alice = await make_family(unit_env, alice, name="Alice's")
        bobs, _ = await make_family(unit_env, bob, name="Bob's")
        await add_member(unit_env, bobs, alice, make_active=False)

        # Act
        response = await use_case.execute(
            SwitchActiveFamilyRequest(user_id=str(alice.id), family_id=str(bobs.id))
        )

        # Assert
        assert response.user.role == Role.MEMBER
        assert response.user.active_family_id == str(bobs.id)
        payload = jwt_service.verify_access_token(response.access_token)
        assert payload.family_id == str(bobs.id)

    @pytest.mark.asyncio
    async def test_non_member_forbidden(self, unit_env):
        use_case = await unit_env.get(SwitchActiveFamilyUseCase)
        alice = await make_user(unit_env)
        family, _ = await make_family(unit_env, alice)
        eve = await make_user(unit_env, email="eve@example.com", name="Eve")

        with pytest.raises(ForbiddenError):
            await use_case.execute(
                SwitchActiveFamilyRequest(user_id=str(eve.id), family_id=str(family.id))
            )
