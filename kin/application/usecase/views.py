"""Response models shared across use cases."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from kin.domain.model import (
    EmailBoundInvite,
    EncryptedInvite,
    Family,
    FamilyMembership,
    User,
)
from kin.domain.value import InviteStatus, Role


class FamilyView(BaseModel):
    """Family as shown to its members."""

    id: str
    name: str
    invite_code: str
    max_members: int
    created_at: datetime

    @classmethod
    def from_family(cls, family: Family) -> "FamilyView":
        return cls(
            id=str(family.id),
            name=family.name,
            invite_code=family.invite_code,
            max_members=family.max_members,
            created_at=family.created_at,
        )


class UserView(BaseModel):
    """The signed-in user's own profile."""

    id: str
    email: str
    name: str
    role: Role
    public_key: str | None
    email_verified: bool
    active_family_id: str | None
    preferences: dict[str, Any]

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            role=user.role,
            public_key=user.public_key,
            email_verified=user.email_verified,
            active_family_id=(
                str(user.active_family_id) if user.active_family_id else None
            ),
            preferences=user.preferences,
        )


class FamilyMembershipView(BaseModel):
    """One of the user's memberships."""

    family: FamilyView
    role: Role
    joined_at: datetime
    is_active: bool

    @classmethod
    def build(
        cls, membership: FamilyMembership, family: Family, user: User
    ) -> "FamilyMembershipView":
        return cls(
            family=FamilyView.from_family(family),
            role=membership.role,
            joined_at=membership.joined_at,
            is_active=user.active_family_id == family.id,
        )


class AuthResponse(BaseModel):
    """Signed-in session."""

    user: UserView
    family: FamilyView | None
    access_token: str
    refresh_token: str


class EmailVerificationResponse(BaseModel):
    """Account created; a verification email is on its way."""

    success: bool = True
    requires_email_verification: bool = True
    email: str
    message: str


class GenericResponse(BaseModel):
    """Outcome without a payload."""

    success: bool = True
    message: str


class InviteView(BaseModel):
    """An invite as listed to the members of its family.

    Email-bound invites have no ``invite_code``: only its hash is stored.
    """

    id: str
    kind: str
    family_id: str
    inviter_id: str
    invitee_email: str | None
    invite_code: str | None
    status: InviteStatus
    expires_at: datetime
    accepted_at: datetime | None
    created_at: datetime

    @classmethod
    def from_encrypted(cls, invite: EncryptedInvite, now: datetime) -> "InviteView":
        status = invite.status
        if status.is_open and invite.is_expired(now):
            status = InviteStatus.EXPIRED
        return cls(
            id=str(invite.id),
            kind=invite.kind,
            family_id=str(invite.family_id),
            inviter_id=str(invite.inviter_id),
            invitee_email=invite.invitee_email,
            invite_code=invite.invite_code,
            status=status,
            expires_at=invite.expires_at,
            accepted_at=invite.accepted_at,
            created_at=invite.created_at,
        )

    @classmethod
    def from_email_bound(
        cls, invite: EmailBoundInvite, invitee_email: str | None, now: datetime
    ) -> "InviteView":
        if invite.is_redeemed:
            status = InviteStatus.ACCEPTED
        elif invite.is_expired(now):
            status = InviteStatus.EXPIRED
        else:
            status = InviteStatus.PENDING
        return cls(
            id=str(invite.id),
            kind=invite.kind,
            family_id=str(invite.family_id),
            inviter_id=str(invite.inviter_id),
            invitee_email=invitee_email,
            invite_code=None,
            status=status,
            expires_at=invite.expires_at,
            accepted_at=invite.redeemed_at,
            created_at=invite.created_at,
        )
