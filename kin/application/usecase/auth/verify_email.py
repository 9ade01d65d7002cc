"""Verify email use case."""

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase
from kin.application.usecase.family.join_family_as_member import (
    JoinFamilyAsMemberRequest,
    JoinFamilyAsMemberUseCase,
)
from kin.application.usecase.views import AuthResponse, FamilyView, UserView
from kin.domain.error import DomainError
from kin.domain.model import User
from kin.domain.repository import UnitOfWork
from kin.domain.service import (
    FamilyService,
    JWTService,
    UserService,
    VerificationService,
)


class VerifyEmailRequest(BaseModel):
    """Verify email request."""

    token: str


class VerifyEmailUseCase(BaseUseCase):
    """Use case for consuming a verification link and starting a session."""

    def __init__(
        self,
        verification_service: VerificationService,
        user_service: UserService,
        family_service: FamilyService,
        jwt_service: JWTService,
        join_family_as_member: JoinFamilyAsMemberUseCase,
        uow: UnitOfWork,
    ) -> None:
        """Initialize verify email use case.

        Args:
            verification_service: Verification token domain service
            user_service: User domain service
            family_service: Family domain service
            jwt_service: JWT token domain service
            join_family_as_member: Redeems an invite code carried by the token
            uow: Unit of work for the verification writes
        """
        self.verification_service = verification_service
        self.user_service = user_service
        self.family_service = family_service
        self.jwt_service = jwt_service
        self.join_family_as_member = join_family_as_member
        self.uow = uow

    async def execute(self, request: VerifyEmailRequest) -> AuthResponse:
        """Execute verification.

        An invite code stored with the token is redeemed afterwards, in its
        own unit of work. Failing to redeem it does not fail verification.

        Raises:
            BadRequestError: If the token is unknown, used or expired
            NotFoundError: If the account was deleted
        """
        with logfire.span("verify_email.execute", token=request.token[:8] + "..."):
            async with self.uow:
                record = await self.verification_service.consume(request.token)
                user = await self.user_service.get_active(record.user_id)
                user = await self.user_service.mark_verified(user)

            logfire.info("Email verified", user_id=str(user.id))

            if record.pending_invite_code:
                user = await self._redeem_pending_invite(
                    user, record.pending_invite_code
                )

            family = None
            if user.active_family_id:
                family = await self.family_service.get_by_id(user.active_family_id)

            tokens = self.jwt_service.issue_session(user)
            return AuthResponse(
                user=UserView.from_user(user),
                family=FamilyView.from_family(family) if family else None,
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
            )

    async def _redeem_pending_invite(self, user: User, invite_code: str) -> User:
        try:
            await self.join_family_as_member.execute(
                JoinFamilyAsMemberRequest(
                    user_id=str(user.id),
                    invite_code=invite_code,
                    make_active=user.active_family_id is None,
                )
            )
        except DomainError as e:
            logfire.warn(
                "Pending invite not redeemed",
                user_id=str(user.id),
                error=e.message,
                error_kind=e.kind.value,
            )
            return user
        return await self.user_service.get_active(user.id)
