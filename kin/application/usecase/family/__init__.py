"""Family use cases."""

from .create_family import CreateFamilyUseCase
from .get_family_members import GetFamilyMembersUseCase
from .join_family import JoinFamilyUseCase
from .join_family_as_member import JoinFamilyAsMemberUseCase
from .promote_to_admin import PromoteToAdminUseCase
from .remove_family_member import RemoveFamilyMemberUseCase
from .switch_active_family import SwitchActiveFamilyUseCase

__all__ = [
    "CreateFamilyUseCase",
    "GetFamilyMembersUseCase",
    "JoinFamilyAsMemberUseCase",
    "JoinFamilyUseCase",
    "PromoteToAdminUseCase",
    "RemoveFamilyMemberUseCase",
    "SwitchActiveFamilyUseCase",
]
