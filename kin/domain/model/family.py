"""Family aggregate and membership entity."""

from datetime import datetime

from pydantic import Field

from kin.domain.model.common import DomainModel, utc_now
from kin.domain.value import FamilyId, MembershipId, Role, UserId

DEFAULT_MAX_MEMBERS = 10


class Family(DomainModel):
    """Family aggregate root.

    Business rules:
    - ``invite_code`` is the shared legacy code; it never expires and is
      multi-use, bounded only by ``max_members``
    - Families are never hard-deleted
    """

    id: FamilyId
    name: str = Field(min_length=1, max_length=100)
    invite_code: str
    max_members: int = Field(default=DEFAULT_MAX_MEMBERS, ge=1)
    created_by: UserId
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class FamilyMembership(DomainModel):
    """A user's membership in a family. Unique per (user_id, family_id)."""

    id: MembershipId
    user_id: UserId
    family_id: FamilyId
    role: Role = Role.MEMBER
    joined_at: datetime = Field(default_factory=utc_now)
