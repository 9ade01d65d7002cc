"""Unit tests for RegisterUseCase."""

import pytest

from kin.adapter.email import RecordingNotifier
from kin.application.usecase.auth.register import RegisterRequest, RegisterUseCase
from kin.domain.error import BadRequestError, ConflictError, ValidationError
from kin.domain.repository import UserRepository
from kin.domain.service import FamilyService, UserService
from kin.domain.value import Role
from tests.conftest import PASSWORD, PUBLIC_KEY, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


def _request(**overrides) -> RegisterRequest:
    fields = {
        "email": "alice@example.com",
        "password": PASSWORD,
        "name": "Alice",
        "public_key": PUBLIC_KEY,
    }
    fields.update(overrides)
    return RegisterRequest(**fields)


class TestRegisterUseCase:
    """Tests for RegisterUseCase."""

    @pytest.mark.asyncio
    async def test_creates_unverified_user_and_sends_link(self, unit_env):
        """Registration should not sign in; it sends a verification link."""
        # Arrange
        use_case = await unit_env.get(RegisterUseCase)
        user_service = await unit_env.get(UserService)
        notifier = await unit_env.get(RecordingNotifier)

        # Act
        response = await use_case.execute(_request())

        # Assert
        assert response.requires_email_verification
        assert response.email == "alice@example.com"
        assert response.message == (
            "Registration successful. Please check your email to verify your account."
        )

        user = await user_service.find_active_by_email("alice@example.com")
        assert user is not None
        assert not user.email_verified
        assert user.public_key == PUBLIC_KEY

        sent = notifier.sent_to("alice@example.com", "verification")
        assert len(sent) == 1
        assert "/verify-email?token=" in sent[0].html

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, unit_env):
        # Arrange
        use_case = await unit_env.get(RegisterUseCase)
        await make_user(unit_env)

        # Act & Assert
        with pytest.raises(ConflictError, match="Email already registered"):
            await use_case.execute(_request(email="ALICE@example.com"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"public_key": "too-short"},
            {"public_key": "A" * 44},
            {"email": "not-an-email"},
        ],
    )
    async def test_malformed_input_rejected(self, unit_env, overrides):
        use_case = await unit_env.get(RegisterUseCase)
        user_repo = await unit_env.get(UserRepository)

        with pytest.raises(ValidationError):
            await use_case.execute(_request(**overrides))
        assert await user_repo.find_active_by_email("alice@example.com") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["x" * 73, "\u00e9" * 40])
    async def test_password_over_bcrypt_limit_rejected(self, unit_env, password):
        """bcrypt reads at most 72 bytes, so longer passwords are refused."""
        use_case = await unit_env.get(RegisterUseCase)
        user_repo = await unit_env.get(UserRepository)

        with pytest.raises(BadRequestError, match="at most 72 bytes"):
            await use_case.execute(_request(password=password))
        assert await user_repo.find_active_by_email("alice@example.com") is None

    @pytest.mark.asyncio
    async def test_family_name_founds_family(self, unit_env):
        """With a family name the new account should become its admin."""
        # Arrange
        use_case = await unit_env.get(RegisterUseCase)
        user_service = await unit_env.get(UserService)
        family_service = await unit_env.get(FamilyService)

        # Act
        await use_case.execute(
            _request(family_name="The Smiths", invite_code="INV-SMIT-HFAM-ILY2")
        )

        # Assert
        user = await user_service.find_active_by_email("alice@example.com")
        assert user.role == Role.ADMIN
        family = await family_service.find_by_invite_code("INV-SMIT-HFAM-ILY2")
        assert family is not None
        assert user.active_family_id == family.id

    @pytest.mark.asyncio
    async def test_delivery_failure_keeps_account(self, unit_env):
        """A failed email should not undo the committed registration."""
        # Arrange
        use_case = await unit_env.get(RegisterUseCase)
        user_service = await unit_env.get(UserService)
        notifier = await unit_env.get(RecordingNotifier)
        notifier.fail = True

        # Act
        response = await use_case.execute(_request())

        # Assert
        assert response.success
        assert await user_service.find_active_by_email("alice@example.com")
