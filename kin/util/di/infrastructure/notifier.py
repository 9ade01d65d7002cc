"""Outbound email infrastructure providers."""

from dishka import Scope, provide
import logfire

from kin.adapter.email import BrevoNotifier, LoggingNotifier
from kin.config import Settings
from kin.domain.service import Notifier
from kin.util.di.base import ProviderBase


class NotifierProvider(ProviderBase):
    """Notifier component base."""

    __mock_component__ = "notifier"


class ProdNotifierProvider(NotifierProvider):
    """Production notifier provider.

    Sends through Brevo when an API key is configured, otherwise logs each
    email so local development works without credentials.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide
    def get_notifier(self, settings: Settings) -> Notifier:
        """Provide email notifier."""
        if settings.email.brevo_api_key:
            return BrevoNotifier(
                settings=settings.email,
                verification_url=settings.verification_url,
                invite_url=settings.invite_url,
            )

        logfire.warn("EMAIL__BREVO_API_KEY not set, emails will only be logged")
        return LoggingNotifier(
            verification_url=settings.verification_url,
            invite_url=settings.invite_url,
        )
