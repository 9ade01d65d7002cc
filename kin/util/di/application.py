"""Application layer DI providers."""

from dishka import Scope, provide

from kin.application.usecase.auth import (
    GetCurrentUserUseCase,
    LoginUseCase,
    RefreshSessionUseCase,
    RegisterUseCase,
    ResendVerificationEmailUseCase,
    VerifyEmailUseCase,
)
from kin.application.usecase.family import (
    CreateFamilyUseCase,
    GetFamilyMembersUseCase,
    JoinFamilyAsMemberUseCase,
    JoinFamilyUseCase,
    PromoteToAdminUseCase,
    RemoveFamilyMemberUseCase,
    SwitchActiveFamilyUseCase,
)
from kin.application.usecase.invite import (
    AcceptInviteUseCase,
    CreateEncryptedInviteUseCase,
    CreateInviteUseCase,
    CreatePendingInviteUseCase,
    GetFamilyInvitesUseCase,
    GetPendingInvitesUseCase,
    ReportInviteDecryptFailureUseCase,
)
from kin.application.usecase.user import (
    DeregisterSelfUseCase,
    GetUserPublicKeyUseCase,
    ResolveAuthorsUseCase,
    UpdateUserPreferencesUseCase,
)
from kin.domain.repository import UnitOfWork
from kin.domain.service import (
    FamilyService,
    InviteService,
    JWTService,
    Notifier,
    UserService,
    VerificationService,
)
from kin.util.di.base import ProviderBase
from kin.util.rate_limit import RateLimiter


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_register_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        verification_service: VerificationService,
        notifier: Notifier,
        uow: UnitOfWork,
    ) -> RegisterUseCase:
        """Provide register use case."""
        return RegisterUseCase(
            user_service=user_service,
            family_service=family_service,
            verification_service=verification_service,
            notifier=notifier,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        jwt_service: JWTService,
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(
            user_service=user_service,
            family_service=family_service,
            jwt_service=jwt_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_verify_email_use_case(
        self,
        verification_service: VerificationService,
        user_service: UserService,
        family_service: FamilyService,
        jwt_service: JWTService,
        join_family_as_member: JoinFamilyAsMemberUseCase,
        uow: UnitOfWork,
    ) -> VerifyEmailUseCase:
        """Provide verify email use case."""
        return VerifyEmailUseCase(
            verification_service=verification_service,
            user_service=user_service,
            family_service=family_service,
            jwt_service=jwt_service,
            join_family_as_member=join_family_as_member,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_resend_verification_email_use_case(
        self,
        user_service: UserService,
        verification_service: VerificationService,
        rate_limiter: RateLimiter,
        notifier: Notifier,
        uow: UnitOfWork,
    ) -> ResendVerificationEmailUseCase:
        """Provide resend verification email use case."""
        return ResendVerificationEmailUseCase(
            user_service=user_service,
            verification_service=verification_service,
            rate_limiter=rate_limiter,
            notifier=notifier,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self, user_service: UserService, family_service: FamilyService
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(
            user_service=user_service, family_service=family_service
        )

    @provide(scope=Scope.REQUEST)
    def get_refresh_session_use_case(
        self, jwt_service: JWTService, user_service: UserService
    ) -> RefreshSessionUseCase:
        """Provide refresh session use case."""
        return RefreshSessionUseCase(jwt_service=jwt_service, user_service=user_service)

    # Family use cases
    @provide(scope=Scope.REQUEST)
    def get_create_family_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        jwt_service: JWTService,
        uow: UnitOfWork,
    ) -> CreateFamilyUseCase:
        """Provide create family use case."""
        return CreateFamilyUseCase(
            user_service=user_service,
            family_service=family_service,
            jwt_service=jwt_service,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_join_family_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        verification_service: VerificationService,
        notifier: Notifier,
        uow: UnitOfWork,
    ) -> JoinFamilyUseCase:
        """Provide join family use case."""
        return JoinFamilyUseCase(
            user_service=user_service,
            family_service=family_service,
            invite_service=invite_service,
            verification_service=verification_service,
            notifier=notifier,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_join_family_as_member_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        uow: UnitOfWork,
    ) -> JoinFamilyAsMemberUseCase:
        """Provide join family as member use case."""
        return JoinFamilyAsMemberUseCase(
            user_service=user_service,
            family_service=family_service,
            invite_service=invite_service,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_switch_active_family_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        jwt_service: JWTService,
    ) -> SwitchActiveFamilyUseCase:
        """Provide switch active family use case."""
        return SwitchActiveFamilyUseCase(
            user_service=user_service,
            family_service=family_service,
            jwt_service=jwt_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_remove_family_member_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        uow: UnitOfWork,
    ) -> RemoveFamilyMemberUseCase:
        """Provide remove family member use case."""
        return RemoveFamilyMemberUseCase(
            user_service=user_service,
            family_service=family_service,
            invite_service=invite_service,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_promote_to_admin_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        uow: UnitOfWork,
    ) -> PromoteToAdminUseCase:
        """Provide promote to admin use case."""
        return PromoteToAdminUseCase(
            user_service=user_service, family_service=family_service, uow=uow
        )

    @provide(scope=Scope.REQUEST)
    def get_family_members_use_case(
        self, user_service: UserService, family_service: FamilyService
    ) -> GetFamilyMembersUseCase:
        """Provide get family members use case."""
        return GetFamilyMembersUseCase(
            user_service=user_service, family_service=family_service
        )

    # Invite use cases
    @provide(scope=Scope.REQUEST)
    def get_create_encrypted_invite_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        notifier: Notifier,
        uow: UnitOfWork,
    ) -> CreateEncryptedInviteUseCase:
        """Provide create encrypted invite use case."""
        return CreateEncryptedInviteUseCase(
            user_service=user_service,
            family_service=family_service,
            invite_service=invite_service,
            notifier=notifier,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_create_pending_invite_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        notifier: Notifier,
        uow: UnitOfWork,
    ) -> CreatePendingInviteUseCase:
        """Provide create pending invite use case."""
        return CreatePendingInviteUseCase(
            user_service=user_service,
            family_service=family_service,
            invite_service=invite_service,
            notifier=notifier,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_create_invite_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        uow: UnitOfWork,
    ) -> CreateInviteUseCase:
        """Provide create invite use case."""
        return CreateInviteUseCase(
            user_service=user_service,
            family_service=family_service,
            invite_service=invite_service,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_accept_invite_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        uow: UnitOfWork,
    ) -> AcceptInviteUseCase:
        """Provide accept invite use case."""
        return AcceptInviteUseCase(
            user_service=user_service,
            family_service=family_service,
            invite_service=invite_service,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_pending_invites_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
    ) -> GetPendingInvitesUseCase:
        """Provide get pending invites use case."""
        return GetPendingInvitesUseCase(
            user_service=user_service,
            family_service=family_service,
            invite_service=invite_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_family_invites_use_case(
        self, family_service: FamilyService, invite_service: InviteService
    ) -> GetFamilyInvitesUseCase:
        """Provide get family invites use case."""
        return GetFamilyInvitesUseCase(
            family_service=family_service, invite_service=invite_service
        )

    @provide(scope=Scope.REQUEST)
    def get_report_invite_decrypt_failure_use_case(
        self, invite_service: InviteService
    ) -> ReportInviteDecryptFailureUseCase:
        """Provide report invite decrypt failure use case."""
        return ReportInviteDecryptFailureUseCase(invite_service=invite_service)

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_deregister_self_use_case(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        uow: UnitOfWork,
    ) -> DeregisterSelfUseCase:
        """Provide deregister self use case."""
        return DeregisterSelfUseCase(
            user_service=user_service,
            family_service=family_service,
            invite_service=invite_service,
            uow=uow,
        )

    @provide(scope=Scope.REQUEST)
    def get_user_public_key_use_case(
        self, user_service: UserService
    ) -> GetUserPublicKeyUseCase:
        """Provide get user public key use case."""
        return GetUserPublicKeyUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_update_user_preferences_use_case(
        self, user_service: UserService
    ) -> UpdateUserPreferencesUseCase:
        """Provide update user preferences use case."""
        return UpdateUserPreferencesUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_resolve_authors_use_case(
        self, user_service: UserService
    ) -> ResolveAuthorsUseCase:
        """Provide resolve authors use case."""
        return ResolveAuthorsUseCase(user_service=user_service)
