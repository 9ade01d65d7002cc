"""Unit tests for LoginUseCase."""

import pytest

from kin.application.usecase.auth.login import LoginRequest, LoginUseCase
from kin.domain.error import EmailVerificationRequiredError, UnauthorizedError
from kin.domain.service import JWTService, UserService
from tests.conftest import PASSWORD, make_family, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestLoginUseCase:
    """Tests for LoginUseCase."""

    @pytest.mark.asyncio
    async def test_verified_user_gets_session_with_active_family(self, unit_env):
        # Arrange
        use_case = await unit_env.get(LoginUseCase)
        jwt_service = await unit_env.get(JWTService)
        user = await make_user(unit_env)
        family, _ = await make_family(unit_env, user)

        # Act
        response = await use_case.execute(
            LoginRequest(email=" alice@example.com ", password=PASSWORD)
        )

        # Assert
        assert response.user.id == str(user.id)
        assert response.family is not None
        assert response.family.id == str(family.id)
        payload = jwt_service.verify_access_token(response.access_token)
        assert payload.user_id == str(user.id)
        assert payload.family_id == str(family.id)
        assert jwt_service.verify_refresh_token(response.refresh_token).user_id == str(
            user.id
        )

    @pytest.mark.asyncio
    async def test_records_last_seen(self, unit_env):
        use_case = await unit_env.get(LoginUseCase)
        user_service = await unit_env.get(UserService)
        user = await make_user(unit_env)

        await use_case.execute(LoginRequest(email="alice@example.com", password=PASSWORD))

        assert (await user_service.get_by_id(user.id)).last_seen_at is not None

    @pytest.mark.asyncio
    async def test_unverified_user_is_told_to_verify(self, unit_env):
        """Unverified accounts should get a distinct, detailed error."""
        # Arrange
        use_case = await unit_env.get(LoginUseCase)
        await make_user(unit_env, verified=False)

        # Act & Assert
        with pytest.raises(EmailVerificationRequiredError) as exc_info:
            await use_case.execute(
                LoginRequest(email="alice@example.com", password=PASSWORD)
            )
        assert exc_info.value.details() == {
            "requires_email_verification": True,
            "email": "alice@example.com",
        }

    @pytest.mark.asyncio
    async def test_wrong_password_rejected(self, unit_env):
        use_case = await unit_env.get(LoginUseCase)
        await make_user(unit_env)

        with pytest.raises(UnauthorizedError, match="Invalid credentials"):
            await use_case.execute(
                LoginRequest(email="alice@example.com", password="not-the-password")
            )
