"""Authentication routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Response, status

from kin.application.usecase.auth import (
    GetCurrentUserUseCase,
    LoginUseCase,
    RefreshSessionUseCase,
    RegisterUseCase,
    ResendVerificationEmailUseCase,
    VerifyEmailUseCase,
)
from kin.application.usecase.auth.get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
)
from kin.application.usecase.auth.login import LoginRequest
from kin.application.usecase.auth.refresh_session import (
    RefreshSessionRequest,
    RefreshSessionResponse,
)
from kin.application.usecase.auth.register import RegisterRequest
from kin.application.usecase.auth.resend_verification_email import (
    ResendVerificationEmailRequest,
)
from kin.application.usecase.auth.verify_email import VerifyEmailRequest
from kin.application.usecase.views import (
    AuthResponse,
    EmailVerificationResponse,
    GenericResponse,
)
from kin.config import Settings
from kin.domain.service import JWTService
from kin.interface.api.auth import authenticate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)

AUTH_COOKIE = "auth_token"


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the access token as an HTTP-only cookie.

    Production serves the frontend from another origin, so the cookie must be
    ``SameSite=None; Secure`` there. Local development stays on ``lax``.
    """
    is_production = settings.environment == "production"
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        secure=is_production,
        samesite="none" if is_production else "lax",
        path="/",
        max_age=settings.auth.access_token_expiry_days * 24 * 60 * 60,
    )


@router.post(
    "/register",
    response_model=EmailVerificationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: RegisterRequest,
    register_use_case: FromDishka[RegisterUseCase],
) -> EmailVerificationResponse:
    """Register a new account.

    No session is issued until the email address is verified.

    Example:
        POST /auth/register
        {
            "email": "alice@example.com",
            "password": "correct horse",
            "name": "Alice",
            "public_key": "<44-char base64 X25519 key>",
            "family_name": "The Smiths"
        }
    """
    return await register_use_case.execute(request)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    login_use_case: FromDishka[LoginUseCase],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Sign in with email and password.

    Unverified accounts get a 403 carrying ``requires_email_verification``.
    """
    auth = await login_use_case.execute(request)
    set_auth_cookie(response, auth.access_token, settings)
    return auth


@router.post("/verify-email", response_model=AuthResponse)
async def verify_email(
    request: VerifyEmailRequest,
    response: Response,
    verify_email_use_case: FromDishka[VerifyEmailUseCase],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Consume a verification token and sign the user in."""
    auth = await verify_email_use_case.execute(request)
    set_auth_cookie(response, auth.access_token, settings)
    logger.info("Email verified, session cookie set")
    return auth


@router.post("/resend-verification", response_model=GenericResponse)
async def resend_verification_email(
    request: ResendVerificationEmailRequest,
    resend_use_case: FromDishka[ResendVerificationEmailUseCase],
) -> GenericResponse:
    """Send a fresh verification email.

    The response is the same whether or not the account exists.
    """
    return await resend_use_case.execute(request)


@router.post("/refresh", response_model=RefreshSessionResponse)
async def refresh_session(
    request: RefreshSessionRequest,
    response: Response,
    refresh_use_case: FromDishka[RefreshSessionUseCase],
    settings: FromDishka[Settings],
) -> RefreshSessionResponse:
    """Exchange a refresh token for a new token pair."""
    tokens = await refresh_use_case.execute(request)
    set_auth_cookie(response, tokens.access_token, settings)
    return tokens


@router.post("/logout", response_model=GenericResponse)
async def logout(response: Response) -> GenericResponse:
    """Clear the authentication cookie."""
    response.delete_cookie(key=AUTH_COOKIE, path="/")
    return GenericResponse(message="Successfully logged out")


@router.get("/me", response_model=GetCurrentUserResponse)
async def get_current_user(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GetCurrentUserResponse:
    """Get the signed-in user with their families."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await get_current_user_use_case.execute(
        GetCurrentUserRequest(user_id=user_id)
    )
