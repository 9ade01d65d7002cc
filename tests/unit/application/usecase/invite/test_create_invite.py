"""Unit tests for CreateInviteUseCase."""

import pytest

from kin.adapter.email import RecordingNotifier
from kin.application.usecase.family.join_family import (
    JoinFamilyRequest,
    JoinFamilyUseCase,
)
from kin.application.usecase.invite.create_invite import (
    CreateInviteRequest,
    CreateInviteUseCase,
)
from kin.domain.error import BadRequestError
from kin.util.crypto import is_email_bound_code
from tests.conftest import PASSWORD, PUBLIC_KEY, make_family, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreateInviteUseCase:
    """Tests for CreateInviteUseCase."""

    @pytest.mark.asyncio
    async def test_code_is_returned_once_and_redeemable(self, unit_env):
        """The plaintext code should work on the sign-up path."""
        # Arrange
        use_case = await unit_env.get(CreateInviteUseCase)
        join = await unit_env.get(JoinFamilyUseCase)
        notifier = await unit_env.get(RecordingNotifier)
        alice = await make_user(unit_env)
        _, alice = await make_family(unit_env, alice)

        # Act
        response = await use_case.execute(
            CreateInviteRequest(user_id=str(alice.id), invitee_email="bob@example.com")
        )

        # Assert
        assert is_email_bound_code(response.invite_code)
        assert response.invitee_email == "bob@example.com"
        assert notifier.sent == []

        await join.execute(
            JoinFamilyRequest(
                email="bob@example.com",
                password=PASSWORD,
                name="Bob",
                invite_code=response.invite_code,
                public_key=PUBLIC_KEY,
            )
        )

    @pytest.mark.asyncio
    async def test_requires_active_family(self, unit_env):
        use_case = await unit_env.get(CreateInviteUseCase)
        alice = await make_user(unit_env)

        with pytest.raises(BadRequestError, match="You must be in a family"):
            await use_case.execute(
                CreateInviteRequest(
                    user_id=str(alice.id), invitee_email="bob@example.com"
                )
            )
