"""In-memory invite repositories for testing."""

from datetime import datetime
from typing import Optional

from kin.domain.error import ConflictError
from kin.domain.model import EmailBoundInvite, EncryptedInvite
from kin.domain.repository import FamilyInviteRepository, InviteRepository
from kin.domain.value import (
    OPEN_INVITE_STATUSES,
    FamilyId,
    FamilyInviteId,
    InviteId,
    InviteStatus,
    UserId,
)

from .database import InMemoryDatabase


class InMemoryInviteRepository(InviteRepository):
    """In-memory implementation of InviteRepository for testing."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db

    async def find_by_id(self, invite_id: InviteId) -> Optional[EncryptedInvite]:
        return self.db.invites.get(invite_id)

    async def find_by_code(self, invite_code: str) -> Optional[EncryptedInvite]:
        for invite in self.db.invites.values():
            if invite.invite_code == invite_code:
                return invite
        return None

    async def find_open_for_email(
        self, family_id: FamilyId, invitee_email: str
    ) -> Optional[EncryptedInvite]:
        needle = invitee_email.strip().lower()
        for invite in self.db.invites.values():
            if (
                invite.family_id == family_id
                and invite.invitee_email.lower() == needle
                and invite.status.is_open
            ):
                return invite
        return None

    async def list_pending_for_email(
        self, invitee_email: str, now: datetime
    ) -> list[EncryptedInvite]:
        needle = invitee_email.strip().lower()
        matches = [
            invite
            for invite in self.db.invites.values()
            if invite.invitee_email.lower() == needle
            and invite.status == InviteStatus.PENDING
            and invite.expires_at > now
        ]
        return sorted(matches, key=lambda inv: inv.created_at, reverse=True)

    async def list_by_family(self, family_id: FamilyId) -> list[EncryptedInvite]:
        matches = [i for i in self.db.invites.values() if i.family_id == family_id]
        return sorted(matches, key=lambda inv: inv.created_at, reverse=True)

    async def save(self, invite: EncryptedInvite) -> EncryptedInvite:
        """Save an invite (create or update).

        Raises:
            ConflictError: On a duplicate code or a second open invite for the
                same family and email
        """
        same_code = await self.find_by_code(invite.invite_code)
        if same_code and same_code.id != invite.id:
            raise ConflictError("An invite with this code or email already exists")
        if invite.status.is_open:
            open_invite = await self.find_open_for_email(
                invite.family_id, invite.invitee_email
            )
            if open_invite and open_invite.id != invite.id:
                raise ConflictError("An invite with this code or email already exists")
        self.db.invites[invite.id] = invite
        return invite

    async def _transition(
        self,
        invite_id: InviteId,
        update: dict,
        at: datetime,
        from_statuses: frozenset[InviteStatus] = frozenset({InviteStatus.PENDING}),
    ) -> bool:
        invite = self.db.invites.get(invite_id)
        if not invite or invite.status not in from_statuses:
            return False
        self.db.invites[invite_id] = invite.model_copy(
            update={**update, "updated_at": at}
        )
        return True

    async def mark_accepted(self, invite_id: InviteId, at: datetime) -> bool:
        return await self._transition(
            invite_id, {"status": InviteStatus.ACCEPTED, "accepted_at": at}, at
        )

    async def mark_expired(self, invite_id: InviteId, at: datetime) -> bool:
        return await self._transition(
            invite_id,
            {"status": InviteStatus.EXPIRED},
            at,
            from_statuses=frozenset(OPEN_INVITE_STATUSES),
        )

    async def revoke_open_for_email(
        self, invitee_email: str, at: datetime, family_id: FamilyId | None = None
    ) -> int:
        needle = invitee_email.strip().lower()
        revoked = 0
        for invite_id, invite in list(self.db.invites.items()):
            if invite.invitee_email.lower() != needle or not invite.status.is_open:
                continue
            if family_id is not None and invite.family_id != family_id:
                continue
            self.db.invites[invite_id] = invite.model_copy(
                update={"status": InviteStatus.REVOKED, "updated_at": at}
            )
            revoked += 1
        return revoked


class InMemoryFamilyInviteRepository(FamilyInviteRepository):
    """In-memory implementation of FamilyInviteRepository for testing."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db

    async def find_by_code_hash(self, code_hash: str) -> Optional[EmailBoundInvite]:
        for invite in self.db.family_invites.values():
            if invite.code_hash == code_hash:
                return invite
        return None

    async def list_by_family(self, family_id: FamilyId) -> list[EmailBoundInvite]:
        matches = [
            i for i in self.db.family_invites.values() if i.family_id == family_id
        ]
        return sorted(matches, key=lambda inv: inv.created_at, reverse=True)

    async def save(self, invite: EmailBoundInvite) -> EmailBoundInvite:
        self.db.family_invites[invite.id] = invite
        return invite

    async def mark_redeemed(
        self, invite_id: FamilyInviteId, user_id: UserId, at: datetime
    ) -> bool:
        invite = self.db.family_invites.get(invite_id)
        if not invite or invite.redeemed_at is not None:
            return False
        self.db.family_invites[invite_id] = invite.model_copy(
            update={"redeemed_at": at, "redeemed_by_user_id": user_id}
        )
        return True
