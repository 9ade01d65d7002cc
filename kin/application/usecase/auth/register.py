"""Register use case."""

import logfire
from pydantic import BaseModel, Field

from kin.application.usecase.base import BaseUseCase, parse_value
from kin.application.usecase.views import EmailVerificationResponse
from kin.domain.repository import UnitOfWork
from kin.domain.service import (
    FamilyService,
    Notifier,
    UserService,
    VerificationService,
    dispatch_notification,
)
from kin.domain.value import EmailAddress, PublicKey

REGISTRATION_MESSAGE = (
    "Registration successful. Please check your email to verify your account."
)


class RegisterRequest(BaseModel):
    """Register request."""

    email: str
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=100)
    public_key: str
    family_name: str | None = Field(default=None, min_length=1, max_length=100)
    invite_code: str | None = None  # Shared code for the new family, if any
    pending_invite_code: str | None = None  # Redeemed once the email is verified


class RegisterUseCase(BaseUseCase):
    """Use case for creating an unverified account.

    With ``family_name`` the account also founds a family (legacy flow). The
    session is only issued by email verification.
    """

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        verification_service: VerificationService,
        notifier: Notifier,
        uow: UnitOfWork,
    ) -> None:
        """Initialize register use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            verification_service: Verification token domain service
            notifier: Outbound email port
            uow: Unit of work for the registration writes
        """
        self.user_service = user_service
        self.family_service = family_service
        self.verification_service = verification_service
        self.notifier = notifier
        self.uow = uow

    async def execute(self, request: RegisterRequest) -> EmailVerificationResponse:
        """Execute registration.

        Steps:
        1. Validate email and public key
        2. Reject emails used by a live account
        3. Create user (and family, if named) and a verification token
        4. Send the verification email after commit

        Raises:
            ValidationError: If the email or public key is malformed
            BadRequestError: If the password is longer than 72 bytes
            ConflictError: If the email is registered or the family code is taken
        """
        email = parse_value(EmailAddress, request.email, "Invalid email address")
        public_key = parse_value(
            PublicKey, request.public_key, "Invalid public key format"
        )

        with logfire.span(
            "register.execute", with_family=request.family_name is not None
        ):
            await self.user_service.ensure_email_available(email.root)
            password_hash = await self.user_service.hash_password(request.password)

            async with self.uow:
                user = await self.user_service.create_user(
                    email=email.root,
                    name=request.name,
                    password_hash=password_hash,
                    public_key=public_key.root,
                )
                if request.family_name:
                    invite_code = await self.family_service.allocate_invite_code(
                        request.invite_code
                    )
                    _, user = await self.family_service.create_family(
                        user, request.family_name, invite_code
                    )
                token = await self.verification_service.issue(
                    user.id, pending_invite_code=request.pending_invite_code
                )

            logfire.info("User registered", user_id=str(user.id))

            await dispatch_notification(
                self.notifier.send_verification_email(user.email, user.name, token),
                "verification_email",
                user_id=str(user.id),
            )

            return EmailVerificationResponse(
                email=user.email, message=REGISTRATION_MESSAGE
            )
