"""JWT token utilities."""

from datetime import datetime, timedelta, timezone
from typing import Literal

import jwt
from pydantic import BaseModel, Field

from kin.config import AuthSettings


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: str
    family_id: str | None = Field(default=None, alias="familyId")
    type: Literal["access", "refresh"]
    exp: datetime

    @property
    def user_id(self) -> str:
        return self.sub


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_access_token(
    user_id: str, family_id: str | None, settings: AuthSettings
) -> str:
    """Create an access token for the user.

    Args:
        user_id: User ID
        family_id: Active family ID, if any
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now(timezone.utc) + timedelta(
        days=settings.access_token_expiry_days
    )

    payload = {"sub": user_id, "type": "access", "exp": expiry}
    if family_id:
        payload["familyId"] = family_id

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_refresh_token(user_id: str, settings: AuthSettings) -> str:
    """Create a refresh token, signed with the separate refresh secret.

    Args:
        user_id: User ID
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now(timezone.utc) + timedelta(
        days=settings.refresh_token_expiry_days
    )

    payload = {"sub": user_id, "type": "refresh", "exp": expiry}

    return jwt.encode(
        payload, settings.refresh_token_secret, algorithm=settings.jwt_algorithm
    )


def _decode(token: str, secret: str, algorithm: str) -> TokenPayload:
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except (jwt.InvalidTokenError, ValueError):
        raise JWTError("Invalid token")


def verify_access_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode an access token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid, expired, or not an access token
    """
    payload = _decode(token, settings.jwt_secret, settings.jwt_algorithm)
    if payload.type != "access":
        raise JWTError("Invalid token")
    return payload


def verify_refresh_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a refresh token.

    Raises:
        JWTError: If token is invalid, expired, or not a refresh token
    """
    payload = _decode(token, settings.refresh_token_secret, settings.jwt_algorithm)
    if payload.type != "refresh":
        raise JWTError("Invalid token")
    return payload
