"""Unit tests for FamilyService."""

import pytest

from kin.domain.error import ConflictError, ForbiddenError
from kin.domain.repository import ChannelRepository, FamilyRepository
from kin.domain.service import FamilyService
from kin.domain.value import Role
from tests.conftest import make_family, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreateFamily:
    """Tests for create_family method."""

    @pytest.mark.asyncio
    async def test_creator_becomes_admin_with_default_channel(self, unit_env):
        """Creating a family should write membership, channel and active family."""
        # Arrange
        family_service = await unit_env.get(FamilyService)
        channel_repo = await unit_env.get(ChannelRepository)
        creator = await make_user(unit_env)

        # Act
        family, updated = await family_service.create_family(
            creator, "The Smiths", "INV-AAAA-BBBB-CCCC"
        )

        # Assert
        membership = await family_service.get_membership(creator.id, family.id)
        assert membership is not None
        assert membership.role == Role.ADMIN
        assert updated.role == Role.ADMIN
        assert updated.active_family_id == family.id
        assert family.max_members == 10

        channels = await channel_repo.list_by_family(family.id)
        assert len(channels) == 1
        assert channels[0].is_default

    @pytest.mark.asyncio
    async def test_requested_invite_code_must_be_free(self, unit_env):
        # Arrange
        family_service = await unit_env.get(FamilyService)
        creator = await make_user(unit_env)
        await family_service.create_family(creator, "A", "INV-AAAA-BBBB-CCCC")

        # Act & Assert
        with pytest.raises(ConflictError, match="already in use"):
            await family_service.allocate_invite_code("INV-AAAA-BBBB-CCCC")

    @pytest.mark.asyncio
    async def test_generated_code_is_legacy_format(self, unit_env):
        family_service = await unit_env.get(FamilyService)

        code = await family_service.allocate_invite_code()

        assert code.startswith("INV-")
        assert len(code) == 18


class TestAddMember:
    """Tests for add_member method."""

    @pytest.mark.asyncio
    async def test_duplicate_membership_conflicts(self, unit_env):
        # Arrange
        family_service = await unit_env.get(FamilyService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)

        # Act & Assert
        with pytest.raises(ConflictError, match="already a member"):
            await family_service.add_member(family.id, admin.id)

    @pytest.mark.asyncio
    async def test_capacity_is_enforced(self, unit_env):
        """The member that would exceed max_members should be rejected."""
        # Arrange
        family_service = await unit_env.get(FamilyService)
        family_repo = await unit_env.get(FamilyRepository)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        await family_repo.save(family.model_copy(update={"max_members": 2}))
        bob = await make_user(unit_env, email="bob@example.com", name="Bob")
        carol = await make_user(unit_env, email="carol@example.com", name="Carol")
        await family_service.add_member(family.id, bob.id)

        # Act & Assert
        with pytest.raises(ConflictError, match="Family is full"):
            await family_service.add_member(family.id, carol.id)
        assert len(await family_service.list_members(family.id)) == 2


class TestRoleChecks:
    """Tests for membership and admin checks."""

    @pytest.mark.asyncio
    async def test_require_admin_rejects_member(self, unit_env):
        # Arrange
        family_service = await unit_env.get(FamilyService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        bob = await make_user(unit_env, email="bob@example.com", name="Bob")
        await family_service.add_member(family.id, bob.id)

        # Act & Assert
        await family_service.require_admin(admin.id, family.id, "nope")
        with pytest.raises(ForbiddenError, match="nope"):
            await family_service.require_admin(bob.id, family.id, "nope")

    @pytest.mark.asyncio
    async def test_require_membership_rejects_outsider(self, unit_env):
        family_service = await unit_env.get(FamilyService)
        admin = await make_user(unit_env)
        family, _ = await make_family(unit_env, admin)
        outsider = await make_user(unit_env, email="eve@example.com", name="Eve")

        with pytest.raises(ForbiddenError):
            await family_service.require_membership(outsider.id, family.id)
