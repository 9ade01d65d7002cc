"""Family and membership routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Response, status
from pydantic import BaseModel, Field

from kin.application.usecase.family import (
    CreateFamilyUseCase,
    GetFamilyMembersUseCase,
    JoinFamilyAsMemberUseCase,
    JoinFamilyUseCase,
    PromoteToAdminUseCase,
    RemoveFamilyMemberUseCase,
    SwitchActiveFamilyUseCase,
)
from kin.application.usecase.family.create_family import CreateFamilyRequest
from kin.application.usecase.family.get_family_members import (
    GetFamilyMembersRequest,
    GetFamilyMembersResponse,
)
from kin.application.usecase.family.join_family import JoinFamilyRequest
from kin.application.usecase.family.join_family_as_member import (
    JoinFamilyAsMemberRequest,
)
from kin.application.usecase.family.promote_to_admin import PromoteToAdminRequest
from kin.application.usecase.family.remove_family_member import (
    RemoveFamilyMemberRequest,
)
from kin.application.usecase.family.switch_active_family import (
    SwitchActiveFamilyRequest,
    SwitchActiveFamilyResponse,
)
from kin.application.usecase.invite import GetFamilyInvitesUseCase
from kin.application.usecase.invite.get_family_invites import (
    GetFamilyInvitesRequest,
    GetFamilyInvitesResponse,
)
from kin.application.usecase.views import (
    AuthResponse,
    EmailVerificationResponse,
    FamilyMembershipView,
    GenericResponse,
)
from kin.config import Settings
from kin.domain.service import JWTService
from kin.interface.api.auth import authenticate
from kin.interface.api.routes.auth import set_auth_cookie

router = APIRouter(prefix="/families", tags=["families"], route_class=DishkaRoute)


class CreateFamilyAPIRequest(BaseModel):
    """API request for creating a family."""

    name: str = Field(min_length=1, max_length=100)
    invite_code: str | None = None


class JoinFamilyAsMemberAPIRequest(BaseModel):
    """API request for joining another family while signed in."""

    invite_code: str
    make_active: bool = True


@router.post("", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def create_family(
    request: CreateFamilyAPIRequest,
    response: Response,
    create_family_use_case: FromDishka[CreateFamilyUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> AuthResponse:
    """Create a family with the caller as its admin.

    A fresh session is issued so the access token carries the new family.
    """
    user_id = authenticate(jwt_service, authorization, auth_token)
    auth = await create_family_use_case.execute(
        CreateFamilyRequest(
            user_id=user_id, name=request.name, invite_code=request.invite_code
        )
    )
    set_auth_cookie(response, auth.access_token, settings)
    return auth


@router.post(
    "/join",
    response_model=EmailVerificationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def join_family(
    request: JoinFamilyRequest,
    join_family_use_case: FromDishka[JoinFamilyUseCase],
) -> EmailVerificationResponse:
    """Create an account and join a family with an invite code."""
    return await join_family_use_case.execute(request)


@router.post("/join-as-member", response_model=FamilyMembershipView)
async def join_family_as_member(
    request: JoinFamilyAsMemberAPIRequest,
    join_use_case: FromDishka[JoinFamilyAsMemberUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> FamilyMembershipView:
    """Join another family with an invite code while signed in."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await join_use_case.execute(
        JoinFamilyAsMemberRequest(
            user_id=user_id,
            invite_code=request.invite_code,
            make_active=request.make_active,
        )
    )


@router.post("/{family_id}/switch", response_model=SwitchActiveFamilyResponse)
async def switch_active_family(
    family_id: str,
    response: Response,
    switch_use_case: FromDishka[SwitchActiveFamilyUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> SwitchActiveFamilyResponse:
    """Make one of the caller's families the active one."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    switched = await switch_use_case.execute(
        SwitchActiveFamilyRequest(user_id=user_id, family_id=family_id)
    )
    set_auth_cookie(response, switched.access_token, settings)
    return switched


@router.get("/{family_id}/members", response_model=GetFamilyMembersResponse)
async def get_family_members(
    family_id: str,
    get_members_use_case: FromDishka[GetFamilyMembersUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GetFamilyMembersResponse:
    """List the members of a family the caller belongs to."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await get_members_use_case.execute(
        GetFamilyMembersRequest(user_id=user_id, family_id=family_id)
    )


@router.delete("/{family_id}/members/{target_user_id}", response_model=GenericResponse)
async def remove_family_member(
    family_id: str,
    target_user_id: str,
    remove_use_case: FromDishka[RemoveFamilyMemberUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GenericResponse:
    """Remove a member from a family (admins only)."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await remove_use_case.execute(
        RemoveFamilyMemberRequest(
            user_id=user_id, target_user_id=target_user_id, family_id=family_id
        )
    )


@router.post(
    "/{family_id}/members/{target_user_id}/promote", response_model=GenericResponse
)
async def promote_to_admin(
    family_id: str,
    target_user_id: str,
    promote_use_case: FromDishka[PromoteToAdminUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GenericResponse:
    """Promote a member to admin (admins only)."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await promote_use_case.execute(
        PromoteToAdminRequest(
            user_id=user_id, target_user_id=target_user_id, family_id=family_id
        )
    )


@router.get("/{family_id}/invites", response_model=GetFamilyInvitesResponse)
async def get_family_invites(
    family_id: str,
    get_invites_use_case: FromDishka[GetFamilyInvitesUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GetFamilyInvitesResponse:
    """List every invite issued for a family (admins only)."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await get_invites_use_case.execute(
        GetFamilyInvitesRequest(user_id=user_id, family_id=family_id)
    )
