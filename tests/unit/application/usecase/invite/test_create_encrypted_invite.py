"""Unit tests for CreateEncryptedInviteUseCase."""

from datetime import datetime, timedelta, timezone

import pytest

from kin.adapter.email import RecordingNotifier
from kin.application.usecase.invite.create_encrypted_invite import (
    CreateEncryptedInviteRequest,
    CreateEncryptedInviteUseCase,
)
from kin.domain.error import BadRequestError, ConflictError, ForbiddenError
from kin.domain.model.common import utc_now
from kin.domain.value import InviteStatus
from tests.conftest import add_member, make_family, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


def _request(inviter, family, **overrides) -> CreateEncryptedInviteRequest:
    fields = {
        "user_id": str(inviter.id),
        "family_id": str(family.id),
        "invitee_email": "bob@example.com",
        "encrypted_family_key": "sealed",
        "nonce": "nonce",
        "invite_code": "INV-ENCR-YPTE-DINV",
        "expires_at": utc_now() + timedelta(days=7),
    }
    fields.update(overrides)
    return CreateEncryptedInviteRequest(**fields)


class TestCreateEncryptedInviteUseCase:
    """Tests for CreateEncryptedInviteUseCase."""

    @pytest.mark.asyncio
    async def test_registered_invitee_is_notified(self, unit_env):
        # Arrange
        use_case = await unit_env.get(CreateEncryptedInviteUseCase)
        notifier = await unit_env.get(RecordingNotifier)
        alice = await make_user(unit_env)
        family, alice = await make_family(unit_env, alice)
        await make_user(unit_env, email="bob@example.com", name="Bob")

        # Act
        view = await use_case.execute(_request(alice, family))

        # Assert
        assert view.status == InviteStatus.PENDING
        assert view.invite_code == "INV-ENCR-YPTE-DINV"
        sent = notifier.sent_to("bob@example.com", "invite")
        assert len(sent) == 1
        assert "INV-ENCR-YPTE-DINV" in sent[0].html

    @pytest.mark.asyncio
    async def test_unregistered_invitee_is_not_emailed(self, unit_env):
        use_case = await unit_env.get(CreateEncryptedInviteUseCase)
        notifier = await unit_env.get(RecordingNotifier)
        alice = await make_user(unit_env)
        family, alice = await make_family(unit_env, alice)

        await use_case.execute(_request(alice, family))

        assert notifier.sent == []

    @pytest.mark.asyncio
    async def test_naive_expiry_is_treated_as_utc(self, unit_env):
        # Arrange
        use_case = await unit_env.get(CreateEncryptedInviteUseCase)
        alice = await make_user(unit_env)
        family, alice = await make_family(unit_env, alice)
        naive = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(days=1)

        # Act
        view = await use_case.execute(_request(alice, family, expires_at=naive))

        # Assert
        assert view.expires_at == naive.replace(tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_past_expiry_rejected(self, unit_env):
        use_case = await unit_env.get(CreateEncryptedInviteUseCase)
        alice = await make_user(unit_env)
        family, alice = await make_family(unit_env, alice)

        with pytest.raises(BadRequestError, match="Invite expiry must be in the future"):
            await use_case.execute(
                _request(alice, family, expires_at=utc_now() - timedelta(hours=1))
            )

    @pytest.mark.asyncio
    async def test_existing_member_conflicts(self, unit_env):
        # Arrange
        use_case = await unit_env.get(CreateEncryptedInviteUseCase)
        alice = await make_user(unit_env)
        family, alice = await make_family(unit_env, alice)
        bob = await make_user(unit_env, email="bob@example.com", name="Bob")
        await add_member(unit_env, family, bob)

        # Act & Assert
        with pytest.raises(ConflictError, match="already a member of this family"):
            await use_case.execute(_request(alice, family))

    @pytest.mark.asyncio
    async def test_duplicate_pending_invite_conflicts(self, unit_env):
        use_case = await unit_env.get(CreateEncryptedInviteUseCase)
        alice = await make_user(unit_env)
        family, alice = await make_family(unit_env, alice)
        await use_case.execute(_request(alice, family))

        with pytest.raises(ConflictError):
            await use_case.execute(
                _request(alice, family, invite_code="INV-OTHE-RCOD-EXXX")
            )

    @pytest.mark.asyncio
    async def test_outsider_cannot_invite(self, unit_env):
        use_case = await unit_env.get(CreateEncryptedInviteUseCase)
        alice = await make_user(unit_env)
        family, _ = await make_family(unit_env, alice)
        eve = await make_user(unit_env, email="eve@example.com", name="Eve")

        with pytest.raises(ForbiddenError):
            await use_case.execute(_request(eve, family))
