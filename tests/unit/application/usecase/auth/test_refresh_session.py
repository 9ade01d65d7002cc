"""Unit tests for RefreshSessionUseCase."""

import pytest

from kin.application.usecase.auth.refresh_session import (
    RefreshSessionRequest,
    RefreshSessionUseCase,
)
from kin.domain.error import UnauthorizedError
from kin.domain.model.common import utc_now
from kin.domain.service import JWTService, UserService
from tests.conftest import make_family, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestRefreshSessionUseCase:
    """Tests for RefreshSessionUseCase."""

    @pytest.mark.asyncio
    async def test_new_access_token_carries_current_family(self, unit_env):
        """Families joined after sign-in should show up in refreshed tokens."""
        # Arrange
        use_case = await unit_env.get(RefreshSessionUseCase)
        jwt_service = await unit_env.get(JWTService)
        user = await make_user(unit_env)
        tokens = jwt_service.issue_session(user)
        family, _ = await make_family(unit_env, user)

        # Act
        response = await use_case.execute(
            RefreshSessionRequest(refresh_token=tokens.refresh_token)
        )

        # Assert
        payload = jwt_service.verify_access_token(response.access_token)
        assert payload.family_id == str(family.id)

    @pytest.mark.asyncio
    async def test_access_token_is_not_a_refresh_token(self, unit_env):
        use_case = await unit_env.get(RefreshSessionUseCase)
        jwt_service = await unit_env.get(JWTService)
        user = await make_user(unit_env)
        tokens = jwt_service.issue_session(user)

        with pytest.raises(UnauthorizedError, match="Invalid refresh token"):
            await use_case.execute(
                RefreshSessionRequest(refresh_token=tokens.access_token)
            )

    @pytest.mark.asyncio
    async def test_deleted_account_cannot_refresh(self, unit_env):
        # Arrange
        use_case = await unit_env.get(RefreshSessionUseCase)
        jwt_service = await unit_env.get(JWTService)
        user_service = await unit_env.get(UserService)
        user = await make_user(unit_env)
        tokens = jwt_service.issue_session(user)
        await user_service.update(user, deleted_at=utc_now())

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await use_case.execute(
                RefreshSessionRequest(refresh_token=tokens.refresh_token)
            )
