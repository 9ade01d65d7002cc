"""JWT token domain service."""

import logfire
from pydantic import BaseModel

from kin.config import AuthSettings
from kin.domain.model import User
from kin.util.jwt import (
    TokenPayload,
    create_access_token,
    create_refresh_token,
    verify_access_token,
    verify_refresh_token,
)

from .base import Service


class SessionTokens(BaseModel):
    """Access and refresh token pair."""

    access_token: str
    refresh_token: str


class JWTService(Service):
    """Domain service for session token operations."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def issue_session(self, user: User) -> SessionTokens:
        """Mint an access/refresh token pair for a user.

        The access token carries the user's active family, if any.

        Args:
            user: Authenticated user

        Returns:
            Token pair
        """
        with logfire.span("jwt_service.issue_session", user_id=str(user.id)):
            tokens = SessionTokens(
                access_token=self.create_access_token(user),
                refresh_token=create_refresh_token(str(user.id), self.auth_settings),
            )
            logfire.info("Session issued", user_id=str(user.id))
            return tokens

    def create_access_token(self, user: User) -> str:
        """Create an access token for a user."""
        family_id = str(user.active_family_id) if user.active_family_id else None
        return create_access_token(str(user.id), family_id, self.auth_settings)

    def verify_access_token(self, token: str) -> TokenPayload:
        """Verify an access token and extract its payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_access_token"):
            try:
                payload = verify_access_token(token, self.auth_settings)
                logfire.info("JWT token verified", user_id=payload.user_id)
                return payload
            except Exception as e:
                logfire.error("JWT token verification failed", error=str(e))
                raise

    def verify_refresh_token(self, token: str) -> TokenPayload:
        """Verify a refresh token.

        Raises:
            JWTError: If token is invalid or expired
        """
        return verify_refresh_token(token, self.auth_settings)
