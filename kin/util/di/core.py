"""Core DI providers (non-mockable)."""

from datetime import timedelta

from dishka import Scope, provide

from kin.config import AuthSettings, Settings
from kin.util.crypto import EmailCipher
from kin.util.di.base import ProviderBase
from kin.util.rate_limit import InMemoryRateLimiter, RateLimiter


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_email_cipher(self, settings: Settings) -> EmailCipher:
        """Provide invitee email cipher.

        Raises:
            ConfigurationError: If INVITES__SECRET is missing or malformed
        """
        return EmailCipher(settings.invites.secret)

    @provide(scope=Scope.APP)
    def provide_rate_limiter(self, settings: Settings) -> RateLimiter:
        """Provide the verification resend rate limiter.

        Counters live in process memory, so the limit applies per instance.
        """
        return InMemoryRateLimiter(
            limit=settings.verification.resend_limit,
            window=timedelta(minutes=settings.verification.resend_window_minutes),
        )
