"""Invite domain service."""

from datetime import datetime, timedelta
from uuid import uuid4

import logfire

from kin.domain.error import (
    BadRequestError,
    ConflictError,
    InviteAlreadyUsedError,
    InviteEmailMismatchError,
)
from kin.domain.model import (
    AnyInvite,
    EmailBoundInvite,
    EncryptedInvite,
    LegacyInvite,
)
from kin.domain.model.common import utc_now
from kin.domain.repository import (
    FamilyInviteRepository,
    FamilyRepository,
    InviteRepository,
)
from kin.domain.value import (
    FamilyId,
    FamilyInviteId,
    InviteId,
    InviteStatus,
    UserId,
)
from kin.util.crypto import (
    EmailCipher,
    generate_legacy_invite_code,
    generate_token,
    hash_value,
    is_email_bound_code,
)
from kin.util.error import EmailDecryptionError

from .base import Service

MAX_CODE_ATTEMPTS = 5


def _code_prefix(code: str) -> str:
    return code[:8] + "..."


class InviteService(Service):
    """Domain service for issuing, resolving and redeeming invites.

    Redemption methods run inside a unit of work; their conditional updates
    decide the winner when the same invite is redeemed concurrently.
    """

    def __init__(
        self,
        invite_repository: InviteRepository,
        family_invite_repository: FamilyInviteRepository,
        family_repository: FamilyRepository,
        email_cipher: EmailCipher,
        email_bound_expiry_days: int = 14,
        pending_registration_expiry_days: int = 30,
    ) -> None:
        """Initialize invite service.

        Args:
            invite_repository: Legacy/encrypted invite repository
            family_invite_repository: Email-bound invite repository
            family_repository: Family repository (shared legacy codes)
            email_cipher: Cipher for invitee emails at rest
            email_bound_expiry_days: Lifetime of email-bound invites
            pending_registration_expiry_days: Lifetime of pending-registration
                invites
        """
        self.invite_repository = invite_repository
        self.family_invite_repository = family_invite_repository
        self.family_repository = family_repository
        self.email_cipher = email_cipher
        self.email_bound_expiry = timedelta(days=email_bound_expiry_days)
        self.pending_registration_expiry = timedelta(
            days=pending_registration_expiry_days
        )

    async def resolve_join_code(self, code: str) -> AnyInvite | None:
        """Resolve a code presented on a join path.

        Lookup order is fixed: the email-bound hash first (only for codes of
        that shape), then the family's shared legacy code.

        Args:
            code: Plaintext code as typed by the user

        Returns:
            The matching invite variant, or None
        """
        with logfire.span("invite_service.resolve_join_code", code=_code_prefix(code)):
            email_bound = None
            if is_email_bound_code(code):
                email_bound = await self.family_invite_repository.find_by_code_hash(
                    hash_value(code)
                )
            if email_bound:
                logfire.info("Resolved email-bound invite", invite_id=str(email_bound.id))
                return email_bound

            family = await self.family_repository.find_by_invite_code(code)
            if family:
                logfire.info("Resolved legacy invite", family_id=str(family.id))
                return LegacyInvite(family_id=family.id, invite_code=code)

            logfire.warn("Invite code not found", code=_code_prefix(code))
            return None

    def decrypt_invitee_email(self, invite: EmailBoundInvite) -> str | None:
        """Decrypt the invitee email of an email-bound invite.

        Returns:
            Plaintext email, or None if the envelope cannot be opened
        """
        try:
            return self.email_cipher.decrypt(invite.invitee_email_encrypted)
        except EmailDecryptionError:
            logfire.error("Invitee email decryption failed", invite_id=str(invite.id))
            return None

    def ensure_recipient(self, invite: EmailBoundInvite, email: str) -> None:
        """Check that an email-bound invite was issued to ``email``.

        Comparison is case-insensitive.

        Raises:
            InviteEmailMismatchError: If the emails differ or the stored
                envelope cannot be decrypted
        """
        invitee_email = self.decrypt_invitee_email(invite)
        if invitee_email is None or invitee_email.casefold() != email.strip().casefold():
            logfire.warn("Invite email mismatch", invite_id=str(invite.id))
            raise InviteEmailMismatchError()

    async def create_email_bound_invite(
        self, family_id: FamilyId, inviter_id: UserId, invitee_email: str
    ) -> tuple[EmailBoundInvite, str]:
        """Issue a single-use invite bound to an email address.

        Args:
            family_id: Family to invite into
            inviter_id: Member issuing the invite
            invitee_email: Invitee email, stored encrypted

        Returns:
            Tuple of (invite, plaintext code). The code is not stored.
        """
        with logfire.span(
            "invite_service.create_email_bound_invite",
            family_id=str(family_id),
            inviter_id=str(inviter_id),
        ):
            code = generate_token()
            invite = EmailBoundInvite(
                id=FamilyInviteId(uuid4()),
                family_id=family_id,
                inviter_id=inviter_id,
                code_hash=hash_value(code),
                invitee_email_encrypted=self.email_cipher.encrypt(invitee_email),
                expires_at=utc_now() + self.email_bound_expiry,
            )
            saved = await self.family_invite_repository.save(invite)
            logfire.info("Email-bound invite created", invite_id=str(saved.id))
            return saved, code

    async def find_open_invite(
        self, family_id: FamilyId, invitee_email: str
    ) -> EncryptedInvite | None:
        return await self.invite_repository.find_open_for_email(family_id, invitee_email)

    async def create_encrypted_invite(
        self,
        family_id: FamilyId,
        inviter_id: UserId,
        invitee_email: str,
        encrypted_family_key: str,
        nonce: str,
        invite_code: str,
        expires_at: datetime,
    ) -> EncryptedInvite:
        """Issue an invite carrying the family key sealed for the invitee.

        An existing PENDING_REGISTRATION invite for the same family and email
        is completed in place, keeping one open invite per (family, email).

        Raises:
            BadRequestError: If ``expires_at`` is not in the future
            ConflictError: If a PENDING invite already exists, or the code is
                taken
        """
        with logfire.span(
            "invite_service.create_encrypted_invite",
            family_id=str(family_id),
            inviter_id=str(inviter_id),
        ):
            now = utc_now()
            if expires_at <= now:
                raise BadRequestError("Invite expiry must be in the future")

            existing = await self.find_open_invite(family_id, invitee_email)
            if existing and existing.status == InviteStatus.PENDING:
                logfire.warn("Pending invite exists", invite_id=str(existing.id))
                raise ConflictError("An invite has already been sent to this email")

            if await self.invite_repository.find_by_code(invite_code):
                raise ConflictError("Invite code already in use")

            if existing:
                invite = existing.model_copy(
                    update={
                        "inviter_id": inviter_id,
                        "invite_code": invite_code,
                        "encrypted_family_key": encrypted_family_key,
                        "nonce": nonce,
                        "status": InviteStatus.PENDING,
                        "expires_at": expires_at,
                        "updated_at": now,
                    }
                )
                logfire.info(
                    "Completing pending-registration invite", invite_id=str(invite.id)
                )
            else:
                invite = EncryptedInvite(
                    id=InviteId(uuid4()),
                    family_id=family_id,
                    inviter_id=inviter_id,
                    invitee_email=invitee_email,
                    invite_code=invite_code,
                    encrypted_family_key=encrypted_family_key,
                    nonce=nonce,
                    status=InviteStatus.PENDING,
                    expires_at=expires_at,
                )

            saved = await self.invite_repository.save(invite)
            logfire.info("Encrypted invite saved", invite_id=str(saved.id))
            return saved

    async def create_pending_registration_invite(
        self,
        family_id: FamilyId,
        inviter_id: UserId,
        invitee_email: str,
        invitee_language: str | None = None,
    ) -> EncryptedInvite:
        """Issue an invite for someone who has not registered yet.

        No key material is attached; it is added once the invitee has a
        public key.

        Raises:
            ConflictError: If an open invite already exists for the email
        """
        with logfire.span(
            "invite_service.create_pending_registration_invite",
            family_id=str(family_id),
            inviter_id=str(inviter_id),
        ):
            if await self.find_open_invite(family_id, invitee_email):
                raise ConflictError("An invite has already been sent to this email")

            invite = EncryptedInvite(
                id=InviteId(uuid4()),
                family_id=family_id,
                inviter_id=inviter_id,
                invitee_email=invitee_email,
                invite_code=await self._allocate_legacy_code(),
                status=InviteStatus.PENDING_REGISTRATION,
                invitee_language=invitee_language,
                expires_at=utc_now() + self.pending_registration_expiry,
            )
            saved = await self.invite_repository.save(invite)
            logfire.info("Pending-registration invite created", invite_id=str(saved.id))
            return saved

    async def _allocate_legacy_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_legacy_invite_code()
            if await self.invite_repository.find_by_code(code):
                continue
            if await self.family_repository.find_by_invite_code(code):
                continue
            return code
        raise ConflictError("Could not allocate a unique invite code")

    async def get_by_code(self, invite_code: str) -> EncryptedInvite | None:
        """Get a legacy/encrypted invite by its exact code."""
        with logfire.span(
            "invite_service.get_by_code", code=_code_prefix(invite_code)
        ):
            return await self.invite_repository.find_by_code(invite_code)

    async def expire(self, invite: EncryptedInvite) -> bool:
        """Flip a lapsed open invite to EXPIRED."""
        with logfire.span("invite_service.expire", invite_id=str(invite.id)):
            changed = await self.invite_repository.mark_expired(invite.id, utc_now())
            if changed:
                logfire.info("Invite expired", invite_id=str(invite.id))
            return changed

    async def accept(self, invite: EncryptedInvite, at: datetime) -> None:
        """Transition an invite PENDING -> ACCEPTED.

        Raises:
            InviteAlreadyUsedError: If another redemption won the race
        """
        with logfire.span("invite_service.accept", invite_id=str(invite.id)):
            if not await self.invite_repository.mark_accepted(invite.id, at):
                logfire.warn("Invite redemption lost race", invite_id=str(invite.id))
                raise InviteAlreadyUsedError()
            logfire.info("Invite accepted", invite_id=str(invite.id))

    async def redeem_email_bound(
        self, invite: EmailBoundInvite, user_id: UserId, at: datetime
    ) -> None:
        """Set the redemption marker of an email-bound invite.

        Raises:
            InviteAlreadyUsedError: If another redemption won the race
        """
        with logfire.span(
            "invite_service.redeem_email_bound",
            invite_id=str(invite.id),
            user_id=str(user_id),
        ):
            if not await self.family_invite_repository.mark_redeemed(
                invite.id, user_id, at
            ):
                logfire.warn("Invite redemption lost race", invite_id=str(invite.id))
                raise InviteAlreadyUsedError()
            logfire.info("Email-bound invite redeemed", invite_id=str(invite.id))

    async def redeem(self, invite: AnyInvite, user_id: UserId, at: datetime) -> None:
        """Record the redemption of any single-use variant.

        Legacy invites are multi-use and record nothing.
        """
        if isinstance(invite, EmailBoundInvite):
            await self.redeem_email_bound(invite, user_id, at)
        elif isinstance(invite, EncryptedInvite):
            await self.accept(invite, at)

    async def revoke_open_for_email(
        self, invitee_email: str, family_id: FamilyId | None = None
    ) -> int:
        """Revoke open invites to an email, in one family or all of them."""
        with logfire.span(
            "invite_service.revoke_open_for_email",
            family_id=str(family_id) if family_id else None,
        ):
            count = await self.invite_repository.revoke_open_for_email(
                invitee_email, utc_now(), family_id
            )
            logfire.info("Invites revoked", count=count)
            return count

    async def list_pending_for_email(self, invitee_email: str) -> list[EncryptedInvite]:
        return await self.invite_repository.list_pending_for_email(
            invitee_email, utc_now()
        )

    async def list_family_invites(
        self, family_id: FamilyId
    ) -> list[EncryptedInvite | EmailBoundInvite]:
        """List every invite of a family across both variants, newest first."""
        with logfire.span("invite_service.list_family_invites", family_id=str(family_id)):
            encrypted = await self.invite_repository.list_by_family(family_id)
            email_bound = await self.family_invite_repository.list_by_family(family_id)
            invites: list[EncryptedInvite | EmailBoundInvite] = [
                *encrypted,
                *email_bound,
            ]
            invites.sort(key=lambda invite: invite.created_at, reverse=True)
            return invites
