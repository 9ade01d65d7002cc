"""Domain layer DI providers."""

from dishka import Scope, provide

from kin.config import AuthSettings, Settings
from kin.domain.repository import (
    ChannelRepository,
    FamilyInviteRepository,
    FamilyRepository,
    InviteRepository,
    MembershipRepository,
    UserRepository,
    VerificationTokenRepository,
)
from kin.domain.service import (
    FamilyService,
    InviteService,
    JWTService,
    UserService,
    VerificationService,
)
from kin.util.crypto import EmailCipher
from kin.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances sharing one session.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_user_service(
        self, user_repository: UserRepository, auth_settings: AuthSettings
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository,
            password_rounds=auth_settings.bcrypt_rounds,
        )

    @provide
    def get_family_service(
        self,
        family_repository: FamilyRepository,
        membership_repository: MembershipRepository,
        channel_repository: ChannelRepository,
        user_repository: UserRepository,
        settings: Settings,
    ) -> FamilyService:
        """Provide family domain service."""
        return FamilyService(
            family_repository=family_repository,
            membership_repository=membership_repository,
            channel_repository=channel_repository,
            user_repository=user_repository,
            default_max_members=settings.invites.default_max_members,
        )

    @provide
    def get_invite_service(
        self,
        invite_repository: InviteRepository,
        family_invite_repository: FamilyInviteRepository,
        family_repository: FamilyRepository,
        email_cipher: EmailCipher,
        settings: Settings,
    ) -> InviteService:
        """Provide invite domain service."""
        return InviteService(
            invite_repository=invite_repository,
            family_invite_repository=family_invite_repository,
            family_repository=family_repository,
            email_cipher=email_cipher,
            email_bound_expiry_days=settings.invites.email_bound_expiry_days,
            pending_registration_expiry_days=(
                settings.invites.pending_registration_expiry_days
            ),
        )

    @provide
    def get_verification_service(
        self, token_repository: VerificationTokenRepository, settings: Settings
    ) -> VerificationService:
        """Provide email verification domain service."""
        return VerificationService(
            token_repository=token_repository,
            expiry_hours=settings.verification.token_expiry_hours,
        )
