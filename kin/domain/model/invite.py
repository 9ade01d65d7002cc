"""Invite entities.

Three ways into a family, modelled as one tagged union on ``kind``:

- ``LegacyInvite``: the family's shared invite code. Never expires, multi-use,
  bounded only by family capacity.
- ``EncryptedInvite``: a per-invitee code that carries the family key sealed
  for the invitee's public key (or, while PENDING_REGISTRATION, nothing yet).
  The invitee email is stored in plaintext.
- ``EmailBoundInvite``: a single-use code looked up only by its SHA-256 hash,
  bound to an invitee email that is encrypted at rest.

All variants share the redeemable capability: ``is_expired``, ``is_redeemed``
and ``ensure_redeemable``. Invites are never physically deleted; they end by
status transition, redemption marker or expiry.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from kin.domain.error import (
    BadRequestError,
    InviteAlreadyUsedError,
    InviteExpiredError,
    InviteRevokedError,
)
from kin.domain.model.common import DomainModel, utc_now
from kin.domain.value import FamilyId, FamilyInviteId, InviteId, InviteStatus, UserId


class RedeemableInvite(DomainModel):
    """Capability shared by every invite variant."""

    family_id: FamilyId

    def is_expired(self, now: datetime) -> bool:
        return False

    @property
    def is_redeemed(self) -> bool:
        return False

    def ensure_redeemable(self, now: datetime) -> None:
        """Raise if the invite can no longer be redeemed.

        Raises:
            InviteExpiredError: If past expiry
            InviteAlreadyUsedError: If already redeemed
        """
        if self.is_expired(now):
            raise InviteExpiredError()
        if self.is_redeemed:
            raise InviteAlreadyUsedError()


class LegacyInvite(RedeemableInvite):
    """The family's shared invite code."""

    kind: Literal["legacy"] = "legacy"
    invite_code: str


class EncryptedInvite(RedeemableInvite):
    """Per-invitee invite carrying E2EE key material.

    ``encrypted_family_key`` and ``nonce`` are opaque to the server.
    """

    kind: Literal["encrypted"] = "encrypted"
    id: InviteId
    inviter_id: UserId
    invitee_email: str
    invite_code: str
    status: InviteStatus = InviteStatus.PENDING
    encrypted_family_key: Optional[str] = None
    nonce: Optional[str] = None
    invitee_language: Optional[str] = None
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    resend_count: int = 0
    last_resend_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def is_expired(self, now: datetime) -> bool:
        if self.status == InviteStatus.EXPIRED:
            return True
        return self.status.is_open and self.expires_at <= now

    @property
    def is_redeemed(self) -> bool:
        return self.status == InviteStatus.ACCEPTED

    @property
    def has_key_material(self) -> bool:
        return self.encrypted_family_key is not None and self.nonce is not None

    def ensure_redeemable(self, now: datetime) -> None:
        """Raise unless this invite is PENDING and unexpired.

        Raises:
            InviteAlreadyUsedError: If accepted
            InviteRevokedError: If revoked
            InviteExpiredError: If expired
            BadRequestError: If still waiting for the invitee to register
        """
        if self.status == InviteStatus.ACCEPTED:
            raise InviteAlreadyUsedError()
        if self.status == InviteStatus.REVOKED:
            raise InviteRevokedError()
        if self.is_expired(now):
            raise InviteExpiredError()
        if self.status == InviteStatus.PENDING_REGISTRATION:
            raise BadRequestError(
                "This invite is waiting for the inviter to share the family key"
            )


class EmailBoundInvite(RedeemableInvite):
    """Single-use invite bound to an encrypted email address.

    The plaintext code is handed to the inviter once at creation and never
    stored.
    """

    kind: Literal["email_bound"] = "email_bound"
    id: FamilyInviteId
    inviter_id: UserId
    code_hash: str
    invitee_email_encrypted: str
    expires_at: datetime
    redeemed_at: Optional[datetime] = None
    redeemed_by_user_id: Optional[UserId] = None
    created_at: datetime = Field(default_factory=utc_now)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    @property
    def is_redeemed(self) -> bool:
        return self.redeemed_at is not None


AnyInvite = Annotated[
    Union[LegacyInvite, EncryptedInvite, EmailBoundInvite],
    Field(discriminator="kind"),
]
