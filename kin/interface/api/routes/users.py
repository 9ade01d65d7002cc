"""User routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Query, Response
from pydantic import BaseModel, Field

from kin.application.usecase.user import (
    DeregisterSelfUseCase,
    GetUserPublicKeyUseCase,
    ResolveAuthorsUseCase,
    UpdateUserPreferencesUseCase,
)
from kin.application.usecase.user.deregister_self import DeregisterSelfRequest
from kin.application.usecase.user.get_user_public_key import (
    GetUserPublicKeyRequest,
    GetUserPublicKeyResponse,
)
from kin.application.usecase.user.resolve_authors import (
    ResolveAuthorsRequest,
    ResolveAuthorsResponse,
)
from kin.application.usecase.user.update_user_preferences import (
    UpdateUserPreferencesRequest,
)
from kin.application.usecase.views import GenericResponse, UserView
from kin.domain.service import JWTService
from kin.interface.api.auth import authenticate
from kin.interface.api.routes.auth import AUTH_COOKIE

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


class UpdatePreferencesAPIRequest(BaseModel):
    """API request for updating preferences."""

    preferred_language: str | None = None


class ResolveAuthorsAPIRequest(BaseModel):
    """API request for resolving author names."""

    user_ids: list[str] = Field(max_length=500)


@router.get("/public-key", response_model=GetUserPublicKeyResponse)
async def get_user_public_key(
    get_key_use_case: FromDishka[GetUserPublicKeyUseCase],
    jwt_service: FromDishka[JWTService],
    email: str = Query(),
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GetUserPublicKeyResponse:
    """Look up a registered user's public key by email."""
    authenticate(jwt_service, authorization, auth_token)
    return await get_key_use_case.execute(GetUserPublicKeyRequest(email=email))


@router.patch("/me/preferences", response_model=UserView)
async def update_my_preferences(
    request: UpdatePreferencesAPIRequest,
    update_use_case: FromDishka[UpdateUserPreferencesUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> UserView:
    """Update the caller's preferences."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await update_use_case.execute(
        UpdateUserPreferencesRequest(
            user_id=user_id, preferred_language=request.preferred_language
        )
    )


@router.delete("/me", response_model=GenericResponse)
async def deregister_self(
    response: Response,
    deregister_use_case: FromDishka[DeregisterSelfUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GenericResponse:
    """Delete the caller's account and leave every family."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    result = await deregister_use_case.execute(DeregisterSelfRequest(user_id=user_id))
    response.delete_cookie(key=AUTH_COOKIE, path="/")
    return result


@router.post("/authors", response_model=ResolveAuthorsResponse)
async def resolve_authors(
    request: ResolveAuthorsAPIRequest,
    resolve_use_case: FromDishka[ResolveAuthorsUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> ResolveAuthorsResponse:
    """Map user IDs to display names for message authors."""
    authenticate(jwt_service, authorization, auth_token)
    return await resolve_use_case.execute(
        ResolveAuthorsRequest(user_ids=request.user_ids)
    )
