"""Unit tests for CreateFamilyUseCase."""

import pytest

from kin.application.usecase.family.create_family import (
    CreateFamilyRequest,
    CreateFamilyUseCase,
)
from kin.domain.error import ConflictError, EmailVerificationRequiredError
from kin.domain.service import JWTService
from kin.domain.value import Role
from tests.conftest import make_family, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreateFamilyUseCase:
    """Tests for CreateFamilyUseCase."""

    @pytest.mark.asyncio
    async def test_creator_is_admin_and_token_carries_family(self, unit_env):
        # Arrange
        use_case = await unit_env.get(CreateFamilyUseCase)
        jwt_service = await unit_env.get(JWTService)
        user = await make_user(unit_env)

        # Act
        response = await use_case.execute(
            CreateFamilyRequest(user_id=str(user.id), name="The Smiths")
        )

        # Assert
        assert response.family is not None
        assert response.family.name == "The Smiths"
        assert response.user.role == Role.ADMIN
        assert response.user.active_family_id == response.family.id
        payload = jwt_service.verify_access_token(response.access_token)
        assert payload.family_id == response.family.id

    @pytest.mark.asyncio
    async def test_unverified_creator_rejected(self, unit_env):
        use_case = await unit_env.get(CreateFamilyUseCase)
        user = await make_user(unit_env, verified=False)

        with pytest.raises(EmailVerificationRequiredError):
            await use_case.execute(
                CreateFamilyRequest(user_id=str(user.id), name="The Smiths")
            )

    @pytest.mark.asyncio
    async def test_existing_member_cannot_create_another(self, unit_env):
        # Arrange
        use_case = await unit_env.get(CreateFamilyUseCase)
        user = await make_user(unit_env)
        await make_family(unit_env, user)

        # Act & Assert
        with pytest.raises(ConflictError, match="You already belong to a family"):
            await use_case.execute(
                CreateFamilyRequest(user_id=str(user.id), name="Second")
            )

    @pytest.mark.asyncio
    async def test_taken_invite_code_conflicts(self, unit_env):
        # Arrange
        use_case = await unit_env.get(CreateFamilyUseCase)
        alice = await make_user(unit_env)
        family, _ = await make_family(unit_env, alice)
        bob = await make_user(unit_env, email="bob@example.com", name="Bob")

        # Act & Assert
        with pytest.raises(ConflictError, match="Invite code already in use"):
            await use_case.execute(
                CreateFamilyRequest(
                    user_id=str(bob.id), name="Bob's", invite_code=family.invite_code
                )
            )
