"""Transactional email clients.

Production sends through the Brevo v3 SMTP API. Without an API key, emails
are written to the log instead, which is enough for local development.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from html import escape
from urllib.parse import urlencode

import httpx
import logfire

from kin.adapter.error import EmailDeliveryError
from kin.config import EmailSettings
from kin.domain.service.notifier import Notifier


@dataclass(frozen=True)
class EmailMessage:
    """A rendered email."""

    to_email: str
    to_name: str | None
    subject: str
    html: str
    tags: tuple[str, ...] = field(default_factory=tuple)


class EmailNotifier(Notifier, ABC):
    """Renders notifications into emails and hands them to ``deliver``.

    Subclasses only implement delivery.
    """

    def __init__(self, verification_url: str, invite_url: str) -> None:
        """Initialize notifier.

        Args:
            verification_url: Frontend page that consumes verification tokens
            invite_url: Frontend page that accepts invite codes
        """
        self.verification_url = verification_url
        self.invite_url = invite_url

    @abstractmethod
    async def deliver(self, message: EmailMessage) -> None:
        """Send a rendered email."""
        pass

    async def send_verification_email(
        self, to_email: str, name: str, token: str
    ) -> None:
        link = f"{self.verification_url}?{urlencode({'token': token})}"
        await self.deliver(
            EmailMessage(
                to_email=to_email,
                to_name=name,
                subject="Verify your email for Kin",
                html=(
                    f"<p>Hi {escape(name)},</p>"
                    "<p>Confirm your email address to finish setting up Kin:</p>"
                    f'<p><a href="{escape(link)}">Verify email</a></p>'
                    "<p>This link expires in 24 hours.</p>"
                ),
                tags=("verification",),
            )
        )

    async def send_invite_notification(
        self, to_email: str, inviter_name: str, family_name: str, invite_code: str
    ) -> None:
        await self.deliver(
            EmailMessage(
                to_email=to_email,
                to_name=None,
                subject=f"{inviter_name} invited you to {family_name} on Kin",
                html=(
                    f"<p>{escape(inviter_name)} invited you to join "
                    f"<strong>{escape(family_name)}</strong>.</p>"
                    "<p>Open Kin and accept the invite with this code:</p>"
                    f"<p><code>{escape(invite_code)}</code></p>"
                ),
                tags=("invite",),
            )
        )

    async def send_registration_invite(
        self,
        to_email: str,
        inviter_name: str,
        family_name: str,
        invite_code: str,
        language: str | None = None,
    ) -> None:
        link = f"{self.invite_url}?{urlencode({'code': invite_code})}"
        lang = escape(language or "en")
        await self.deliver(
            EmailMessage(
                to_email=to_email,
                to_name=None,
                subject=f"{inviter_name} invited you to {family_name} on Kin",
                html=(
                    f'<div lang="{lang}">'
                    f"<p>{escape(inviter_name)} would like you to join "
                    f"<strong>{escape(family_name)}</strong> on Kin.</p>"
                    f'<p><a href="{escape(link)}">Create your account</a></p>'
                    f"<p>Your invite code: <code>{escape(invite_code)}</code></p>"
                    "</div>"
                ),
                tags=("invite", "registration"),
            )
        )


class BrevoNotifier(EmailNotifier):
    """Sends email through the Brevo transactional API."""

    def __init__(
        self, settings: EmailSettings, verification_url: str, invite_url: str
    ) -> None:
        """Initialize Brevo notifier.

        Args:
            settings: Email settings with API key and sender
            verification_url: Frontend page that consumes verification tokens
            invite_url: Frontend page that accepts invite codes
        """
        super().__init__(verification_url=verification_url, invite_url=invite_url)
        self.settings = settings

    async def deliver(self, message: EmailMessage) -> None:
        """POST the message to Brevo.

        Raises:
            EmailDeliveryError: If the request fails or Brevo rejects it
        """
        recipient = {"email": message.to_email}
        if message.to_name:
            recipient["name"] = message.to_name

        payload = {
            "sender": {
                "name": self.settings.from_name,
                "email": self.settings.from_address,
            },
            "to": [recipient],
            "subject": message.subject,
            "htmlContent": message.html,
            "tags": list(message.tags),
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.settings.api_url,
                    json=payload,
                    headers={
                        "api-key": self.settings.brevo_api_key or "",
                        "accept": "application/json",
                    },
                    timeout=self.settings.timeout_seconds,
                )
        except httpx.HTTPError as e:
            logfire.error("Brevo HTTP error", error=str(e))
            raise EmailDeliveryError(f"HTTP error sending email: {e}")

        if response.status_code >= 400:
            logfire.error(
                "Brevo rejected email",
                status_code=response.status_code,
                error=response.text,
            )
            raise EmailDeliveryError(f"Email send failed: {response.status_code}")

        logfire.info("Email sent", tags=list(message.tags))


class LoggingNotifier(EmailNotifier):
    """Writes emails to the log instead of sending them."""

    async def deliver(self, message: EmailMessage) -> None:
        logfire.info(
            "Email not sent (no provider configured)",
            subject=message.subject,
            tags=list(message.tags),
            html=message.html,
        )


class RecordingNotifier(EmailNotifier):
    """Mock notifier for testing.

    Keeps every delivered message in ``sent``. Set ``fail`` to make delivery
    raise, to exercise post-commit failure handling.
    """

    def __init__(self) -> None:
        super().__init__(
            verification_url="http://localhost:3000/verify-email",
            invite_url="http://localhost:3000/join",
        )
        self.sent: list[EmailMessage] = []
        self.fail = False

    async def deliver(self, message: EmailMessage) -> None:
        if self.fail:
            raise EmailDeliveryError("Simulated delivery failure")
        self.sent.append(message)

    def sent_to(self, email: str, tag: str | None = None) -> list[EmailMessage]:
        return [
            m
            for m in self.sent
            if m.to_email == email and (tag is None or tag in m.tags)
        ]
