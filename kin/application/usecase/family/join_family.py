"""Join family use case."""

from uuid import uuid4

import logfire
from pydantic import BaseModel, Field

from kin.application.usecase.base import BaseUseCase, parse_value
from kin.application.usecase.views import EmailVerificationResponse
from kin.domain.error import UnauthorizedError
from kin.domain.model import EmailBoundInvite
from kin.domain.model.common import utc_now
from kin.domain.repository import UnitOfWork
from kin.domain.service import (
    FamilyService,
    InviteService,
    Notifier,
    UserService,
    VerificationService,
    dispatch_notification,
)
from kin.domain.value import EmailAddress, PublicKey, Role, UserId

JOIN_MESSAGE = "Welcome! Please check your email to verify your account."


class JoinFamilyRequest(BaseModel):
    """Sign up into an existing family."""

    email: str
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=100)
    invite_code: str
    public_key: str


class JoinFamilyUseCase(BaseUseCase):
    """Use case for an anonymous visitor signing up with an invite code.

    Email-bound invites are looked up by code hash first; only when none
    matches is the code tried as a family's shared code.
    """

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        verification_service: VerificationService,
        notifier: Notifier,
        uow: UnitOfWork,
    ) -> None:
        """Initialize join family use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            invite_service: Invite domain service
            verification_service: Verification token domain service
            notifier: Outbound email port
            uow: Unit of work for the sign-up writes
        """
        self.user_service = user_service
        self.family_service = family_service
        self.invite_service = invite_service
        self.verification_service = verification_service
        self.notifier = notifier
        self.uow = uow

    async def execute(self, request: JoinFamilyRequest) -> EmailVerificationResponse:
        """Execute sign-up with invite.

        Steps:
        1. Resolve the code (email-bound hash, then shared family code)
        2. For email-bound invites: expiry, redemption, then recipient email
        3. Hash the password outside the unit of work
        4. In one unit of work: the conditional redemption first, then the
           email check, user, membership and verification token
        5. Send the verification email after commit

        The user ID is allocated before the redemption marker references it.

        Raises:
            ValidationError: If the email or public key is malformed
            UnauthorizedError: If the code matches nothing
            InviteExpiredError: If the invite has expired
            InviteAlreadyUsedError: If the invite was already redeemed
            InviteEmailMismatchError: If the invite targets another email
            BadRequestError: If the password is longer than 72 bytes
            ConflictError: If the email is registered or the family is full
        """
        email = parse_value(EmailAddress, request.email, "Invalid email address")
        public_key = parse_value(
            PublicKey, request.public_key, "Invalid public key format"
        )

        with logfire.span("join_family.execute"):
            invite = await self.invite_service.resolve_join_code(request.invite_code)
            if invite is None:
                raise UnauthorizedError("Invalid invite code")

            now = utc_now()
            invite.ensure_redeemable(now)
            if isinstance(invite, EmailBoundInvite):
                self.invite_service.ensure_recipient(invite, email.root)

            family = await self.family_service.get_by_id(invite.family_id)
            password_hash = await self.user_service.hash_password(request.password)
            user_id = UserId(uuid4())

            async with self.uow:
                await self.invite_service.redeem(invite, user_id, now)
                await self.user_service.ensure_email_available(email.root)
                user = await self.user_service.create_user(
                    email=email.root,
                    name=request.name,
                    password_hash=password_hash,
                    public_key=public_key.root,
                    role=Role.MEMBER,
                    active_family_id=family.id,
                    user_id=user_id,
                )
                await self.family_service.add_member(family.id, user.id, Role.MEMBER)
                token = await self.verification_service.issue(user.id)

            logfire.info(
                "User joined family",
                user_id=str(user.id),
                family_id=str(family.id),
                invite_kind=invite.kind,
            )

            await dispatch_notification(
                self.notifier.send_verification_email(user.email, user.name, token),
                "verification_email",
                user_id=str(user.id),
            )

            return EmailVerificationResponse(email=user.email, message=JOIN_MESSAGE)
