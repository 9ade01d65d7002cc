"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from kin.domain.model import (
    Channel,
    EmailBoundInvite,
    EmailVerificationToken,
    EncryptedInvite,
    Family,
    FamilyMembership,
    User,
)
from kin.domain.value import (
    ChannelId,
    FamilyId,
    FamilyInviteId,
    InviteId,
    InviteStatus,
    MembershipId,
    Role,
    UserId,
    VerificationTokenId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def _optional_uuid(value: Any) -> UUID | None:
    return _uuid(value) if value is not None else None


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    active_family_id = _optional_uuid(row.get("active_family_id"))
    return User(
        id=UserId(_uuid(row["id"])),
        email=row["email"],
        name=row["name"],
        password_hash=row["password_hash"],
        public_key=row.get("public_key"),
        email_verified=row["email_verified"],
        email_verified_at=row.get("email_verified_at"),
        role=Role(row["role"]),
        active_family_id=FamilyId(active_family_id) if active_family_id else None,
        preferences=row.get("preferences") or {},
        last_seen_at=row.get("last_seen_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    data = user.model_dump()
    data["role"] = user.role.value
    return data


def row_to_family(row: Dict[str, Any]) -> Family:
    """Convert database row to Family domain model."""
    return Family(
        id=FamilyId(_uuid(row["id"])),
        name=row["name"],
        invite_code=row["invite_code"],
        max_members=row["max_members"],
        created_by=UserId(_uuid(row["created_by"])),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def family_to_dict(family: Family) -> Dict[str, Any]:
    """Convert Family domain model to database dict."""
    return family.model_dump()


def row_to_membership(row: Dict[str, Any]) -> FamilyMembership:
    """Convert database row to FamilyMembership domain model."""
    return FamilyMembership(
        id=MembershipId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        family_id=FamilyId(_uuid(row["family_id"])),
        role=Role(row["role"]),
        joined_at=row["joined_at"],
    )


def membership_to_dict(membership: FamilyMembership) -> Dict[str, Any]:
    """Convert FamilyMembership domain model to database dict."""
    data = membership.model_dump()
    data["role"] = membership.role.value
    return data


def row_to_invite(row: Dict[str, Any]) -> EncryptedInvite:
    """Convert database row to EncryptedInvite domain model."""
    return EncryptedInvite(
        id=InviteId(_uuid(row["id"])),
        family_id=FamilyId(_uuid(row["family_id"])),
        inviter_id=UserId(_uuid(row["inviter_id"])),
        invitee_email=row["invitee_email"],
        invite_code=row["invite_code"],
        status=InviteStatus(row["status"]),
        encrypted_family_key=row.get("encrypted_family_key"),
        nonce=row.get("nonce"),
        invitee_language=row.get("invitee_language"),
        expires_at=row["expires_at"],
        accepted_at=row.get("accepted_at"),
        resend_count=row.get("resend_count", 0),
        last_resend_at=row.get("last_resend_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def invite_to_dict(invite: EncryptedInvite) -> Dict[str, Any]:
    """Convert EncryptedInvite domain model to database dict."""
    data = invite.model_dump(exclude={"kind"})
    data["status"] = invite.status.value
    return data


def row_to_family_invite(row: Dict[str, Any]) -> EmailBoundInvite:
    """Convert database row to EmailBoundInvite domain model."""
    redeemed_by = _optional_uuid(row.get("redeemed_by_user_id"))
    return EmailBoundInvite(
        id=FamilyInviteId(_uuid(row["id"])),
        family_id=FamilyId(_uuid(row["family_id"])),
        inviter_id=UserId(_uuid(row["inviter_id"])),
        code_hash=row["code_hash"],
        invitee_email_encrypted=row["invitee_email_encrypted"],
        expires_at=row["expires_at"],
        redeemed_at=row.get("redeemed_at"),
        redeemed_by_user_id=UserId(redeemed_by) if redeemed_by else None,
        created_at=row["created_at"],
    )


def family_invite_to_dict(invite: EmailBoundInvite) -> Dict[str, Any]:
    """Convert EmailBoundInvite domain model to database dict."""
    return invite.model_dump(exclude={"kind"})


def row_to_verification_token(row: Dict[str, Any]) -> EmailVerificationToken:
    """Convert database row to EmailVerificationToken domain model."""
    return EmailVerificationToken(
        id=VerificationTokenId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        token_hash=row["token_hash"],
        expires_at=row["expires_at"],
        used_at=row.get("used_at"),
        pending_invite_code=row.get("pending_invite_code"),
        created_at=row["created_at"],
    )


def verification_token_to_dict(token: EmailVerificationToken) -> Dict[str, Any]:
    """Convert EmailVerificationToken domain model to database dict."""
    return token.model_dump()


def row_to_channel(row: Dict[str, Any]) -> Channel:
    """Convert database row to Channel domain model."""
    return Channel(
        id=ChannelId(_uuid(row["id"])),
        family_id=FamilyId(_uuid(row["family_id"])),
        name=row["name"],
        description=row.get("description"),
        icon=row.get("icon"),
        is_default=row["is_default"],
        created_by=UserId(_uuid(row["created_by"])),
        created_at=row["created_at"],
    )


def channel_to_dict(channel: Channel) -> Dict[str, Any]:
    """Convert Channel domain model to database dict."""
    return channel.model_dump()
