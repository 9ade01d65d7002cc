"""Resend verification email use case."""

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase
from kin.application.usecase.views import GenericResponse
from kin.domain.error import RateLimitExceededError
from kin.domain.repository import UnitOfWork
from kin.domain.service import (
    Notifier,
    UserService,
    VerificationService,
    dispatch_notification,
)
from kin.util.rate_limit import RateLimiter

RESEND_MESSAGE = (
    "If an account exists with this email, a verification email has been sent."
)


class ResendVerificationEmailRequest(BaseModel):
    """Resend verification email request."""

    email: str


class ResendVerificationEmailUseCase(BaseUseCase):
    """Use case for requesting a fresh verification link.

    The response is the same whether or not the account exists, so it cannot
    be used to discover registered emails.
    """

    def __init__(
        self,
        user_service: UserService,
        verification_service: VerificationService,
        rate_limiter: RateLimiter,
        notifier: Notifier,
        uow: UnitOfWork,
    ) -> None:
        """Initialize resend verification email use case.

        Args:
            user_service: User domain service
            verification_service: Verification token domain service
            rate_limiter: Per-email resend throttle
            notifier: Outbound email port
            uow: Unit of work for the token writes
        """
        self.user_service = user_service
        self.verification_service = verification_service
        self.rate_limiter = rate_limiter
        self.notifier = notifier
        self.uow = uow

    async def execute(self, request: ResendVerificationEmailRequest) -> GenericResponse:
        """Execute resend.

        Raises:
            RateLimitExceededError: If too many resends were requested for
                this email within the window
        """
        email = request.email.strip()

        with logfire.span("resend_verification_email.execute"):
            decision = self.rate_limiter.check_and_increment(email.lower())
            if not decision.allowed:
                raise RateLimitExceededError(decision.retry_after_seconds)

            user = await self.user_service.find_active_by_email(email)
            if not user or user.email_verified:
                logfire.info("Resend skipped", account_found=user is not None)
                return GenericResponse(message=RESEND_MESSAGE)

            async with self.uow:
                token = await self.verification_service.issue(
                    user.id, invalidate_previous=True
                )

            await dispatch_notification(
                self.notifier.send_verification_email(user.email, user.name, token),
                "verification_email_resend",
                user_id=str(user.id),
            )
            return GenericResponse(message=RESEND_MESSAGE)
