"""Caller authentication for API routes."""

from kin.domain.error import UnauthorizedError
from kin.domain.service import JWTService

BEARER_PREFIX = "Bearer "


def authenticate(
    jwt_service: JWTService,
    authorization: str | None,
    auth_token: str | None,
) -> str:
    """Resolve the caller's user ID from request credentials.

    The ``Authorization: Bearer`` header wins over the ``auth_token`` cookie.

    Args:
        jwt_service: JWT service from DI
        authorization: Raw Authorization header
        auth_token: JWT from cookie

    Returns:
        Caller user ID

    Raises:
        UnauthorizedError: If no credentials were sent
        JWTError: If the token is invalid or expired
    """
    token = auth_token
    if authorization and authorization.startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX) :].strip()

    if not token:
        raise UnauthorizedError("Not authenticated")

    return jwt_service.verify_access_token(token).user_id
