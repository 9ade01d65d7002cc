"""Unit tests for InviteService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from kin.domain.error import (
    BadRequestError,
    ConflictError,
    InviteAlreadyUsedError,
    InviteEmailMismatchError,
)
from kin.domain.model import EmailBoundInvite, LegacyInvite
from kin.domain.model.common import utc_now
from kin.domain.repository import FamilyInviteRepository, InviteRepository
from kin.domain.service import InviteService
from kin.domain.value import InviteStatus, UserId
from kin.util.crypto import hash_value
from tests.conftest import make_family, make_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestResolveJoinCode:
    """Tests for resolve_join_code method."""

    @pytest.mark.asyncio
    async def test_resolves_email_bound_code_by_hash(self, unit_env):
        """Email-bound codes should resolve through their stored hash."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        invite, code = await invite_service.create_email_bound_invite(
            family.id, admin.id, "bob@example.com"
        )

        # Act
        resolved = await invite_service.resolve_join_code(code)

        # Assert
        assert isinstance(resolved, EmailBoundInvite)
        assert resolved.id == invite.id
        assert resolved.code_hash == hash_value(code)

    @pytest.mark.asyncio
    async def test_resolves_family_legacy_code(self, unit_env):
        """The family's shared code should resolve to a legacy invite."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)

        # Act
        resolved = await invite_service.resolve_join_code(family.invite_code)

        # Assert
        assert isinstance(resolved, LegacyInvite)
        assert resolved.family_id == family.id

    @pytest.mark.asyncio
    async def test_unknown_code_resolves_to_none(self, unit_env):
        invite_service = await unit_env.get(InviteService)

        assert await invite_service.resolve_join_code("INV-ZZZZ-ZZZZ-ZZZZ") is None
        assert await invite_service.resolve_join_code("A" * 22) is None


class TestEmailBoundInvites:
    """Tests for email-bound invite issuance and redemption."""

    @pytest.mark.asyncio
    async def test_plaintext_code_and_email_not_stored(self, unit_env):
        """Only the code hash and the encrypted email should be persisted."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        repo = await unit_env.get(FamilyInviteRepository)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)

        # Act
        invite, code = await invite_service.create_email_bound_invite(
            family.id, admin.id, "bob@example.com"
        )

        # Assert
        stored = await repo.find_by_code_hash(hash_value(code))
        assert stored is not None
        assert code not in stored.model_dump_json()
        assert "bob@example.com" not in stored.invitee_email_encrypted
        assert invite_service.decrypt_invitee_email(stored) == "bob@example.com"
        lifetime = stored.expires_at - stored.created_at
        assert abs(lifetime - timedelta(days=14)) < timedelta(seconds=5)

    @pytest.mark.asyncio
    async def test_recipient_match_is_case_insensitive(self, unit_env):
        # Arrange
        invite_service = await unit_env.get(InviteService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        invite, _ = await invite_service.create_email_bound_invite(
            family.id, admin.id, "Bob@Example.com"
        )

        # Act & Assert
        invite_service.ensure_recipient(invite, " bob@example.COM ")
        with pytest.raises(InviteEmailMismatchError):
            invite_service.ensure_recipient(invite, "carol@example.com")

    @pytest.mark.asyncio
    async def test_undecryptable_envelope_is_a_mismatch(self, unit_env):
        """A corrupted envelope should never match any email."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        invite, _ = await invite_service.create_email_bound_invite(
            family.id, admin.id, "bob@example.com"
        )
        corrupted = invite.model_copy(update={"invitee_email_encrypted": "garbage"})

        # Act & Assert
        with pytest.raises(InviteEmailMismatchError):
            invite_service.ensure_recipient(corrupted, "bob@example.com")

    @pytest.mark.asyncio
    async def test_redeem_is_at_most_once(self, unit_env):
        """A second redemption should lose the conditional update."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        invite, _ = await invite_service.create_email_bound_invite(
            family.id, admin.id, "bob@example.com"
        )
        redeemer = UserId(uuid4())

        # Act
        await invite_service.redeem(invite, redeemer, utc_now())

        # Assert
        with pytest.raises(InviteAlreadyUsedError):
            await invite_service.redeem(invite, UserId(uuid4()), utc_now())


class TestEncryptedInvites:
    """Tests for encrypted and pending-registration invites."""

    @pytest.mark.asyncio
    async def test_past_expiry_rejected(self, unit_env):
        # Arrange
        invite_service = await unit_env.get(InviteService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)

        # Act & Assert
        with pytest.raises(BadRequestError, match="future"):
            await invite_service.create_encrypted_invite(
                family.id,
                admin.id,
                "bob@example.com",
                "sealed",
                "nonce",
                "INV-AAAA-BBBB-CCCC",
                utc_now() - timedelta(minutes=1),
            )

    @pytest.mark.asyncio
    async def test_second_pending_invite_for_same_email_conflicts(self, unit_env):
        """Only one open invite per (family, email) may exist."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        expires_at = utc_now() + timedelta(days=7)
        await invite_service.create_encrypted_invite(
            family.id,
            admin.id,
            "bob@example.com",
            "k",
            "n",
            "INV-AAAA-BBBB-CCCC",
            expires_at,
        )

        # Act & Assert
        with pytest.raises(ConflictError):
            await invite_service.create_encrypted_invite(
                family.id,
                admin.id,
                "BOB@example.com",
                "k",
                "n",
                "INV-DDDD-EEEE-FFFF",
                expires_at,
            )

    @pytest.mark.asyncio
    async def test_encrypted_invite_completes_pending_registration(self, unit_env):
        """Key material should be attached to the existing open invite."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        invite_repo = await unit_env.get(InviteRepository)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        pending = await invite_service.create_pending_registration_invite(
            family.id, admin.id, "bob@example.com", "fr"
        )
        assert pending.status == InviteStatus.PENDING_REGISTRATION
        assert not pending.has_key_material

        # Act
        completed = await invite_service.create_encrypted_invite(
            family.id,
            admin.id,
            "bob@example.com",
            "sealed",
            "nonce",
            "INV-AAAA-BBBB-CCCC",
            utc_now() + timedelta(days=7),
        )

        # Assert
        assert completed.id == pending.id
        assert completed.status == InviteStatus.PENDING
        assert completed.invitee_language == "fr"
        assert len(await invite_repo.list_by_family(family.id)) == 1

    @pytest.mark.asyncio
    async def test_revoke_open_scoped_to_family(self, unit_env):
        # Arrange
        invite_service = await unit_env.get(InviteService)
        admin = await make_user(unit_env)
        family_a, admin = await make_family(unit_env, admin, name="A")
        family_b, _ = await make_family(unit_env, admin, name="B")
        await invite_service.create_pending_registration_invite(
            family_a.id, admin.id, "bob@example.com"
        )
        other = await invite_service.create_pending_registration_invite(
            family_b.id, admin.id, "bob@example.com"
        )

        # Act
        revoked = await invite_service.revoke_open_for_email(
            "bob@example.com", family_a.id
        )

        # Assert
        assert revoked == 1
        still_open = await invite_service.find_open_invite(family_b.id, "bob@example.com")
        assert still_open is not None
        assert still_open.id == other.id

    @pytest.mark.asyncio
    async def test_list_family_invites_merges_variants(self, unit_env):
        # Arrange
        invite_service = await unit_env.get(InviteService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        await invite_service.create_pending_registration_invite(
            family.id, admin.id, "bob@example.com"
        )
        await invite_service.create_email_bound_invite(
            family.id, admin.id, "carol@example.com"
        )

        # Act
        invites = await invite_service.list_family_invites(family.id)

        # Assert
        assert {invite.kind for invite in invites} == {"encrypted", "email_bound"}
        assert invites[0].created_at >= invites[1].created_at
