"""User aggregate root.

Users register with email and password, verify their address, and belong to
zero or more families. Accounts are soft-deleted so that message history keeps
a stable author reference.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from kin.domain.model.common import DomainModel, utc_now
from kin.domain.value import FamilyId, Role, UserId

REMOVED_USER_DISPLAY_NAME = "Removed user"


class User(DomainModel):
    """User aggregate root.

    ``role`` mirrors the role of the membership in ``active_family_id``.
    """

    id: UserId
    email: str
    name: str
    password_hash: str
    public_key: Optional[str] = None
    email_verified: bool = False
    email_verified_at: Optional[datetime] = None
    role: Role = Role.MEMBER
    active_family_id: Optional[FamilyId] = None
    preferences: dict[str, Any] = Field(default_factory=dict)
    last_seen_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


def author_display_name(user: User | None) -> str:
    """Name to show next to content authored by ``user``.

    Deleted or missing authors render as a fixed placeholder.
    """
    if user is None or user.is_deleted:
        return REMOVED_USER_DISPLAY_NAME
    return user.name
