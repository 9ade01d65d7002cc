"""Outbound notification port."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable

import logfire


class Notifier(ABC):
    """Delivers transactional emails.

    Implementations are fire-and-forget from the domain's point of view:
    callers dispatch after their unit of work has committed, and a delivery
    failure never undoes the committed state.
    """

    @abstractmethod
    async def send_verification_email(
        self, to_email: str, name: str, token: str
    ) -> None:
        """Send the email verification link.

        Args:
            to_email: Recipient
            name: Recipient display name
            token: Plaintext verification token
        """
        pass

    @abstractmethod
    async def send_invite_notification(
        self, to_email: str, inviter_name: str, family_name: str, invite_code: str
    ) -> None:
        """Tell a registered user they have been invited to a family."""
        pass

    @abstractmethod
    async def send_registration_invite(
        self,
        to_email: str,
        inviter_name: str,
        family_name: str,
        invite_code: str,
        language: str | None = None,
    ) -> None:
        """Invite someone without an account to register and join."""
        pass


async def dispatch_notification(
    send: Awaitable[None], event: str, **attributes
) -> bool:
    """Await a notifier call, logging and absorbing any failure.

    Args:
        send: Pending notifier call
        event: Event name for logs
        **attributes: Extra log attributes (never secrets)

    Returns:
        True if the notification was handed off successfully
    """
    try:
        await send
        logfire.info("Notification sent", notification_event=event, **attributes)
        return True
    except Exception as e:
        logfire.warn(
            "Notification failed",
            notification_event=event,
            error=str(e),
            error_type=type(e).__name__,
            **attributes,
        )
        return False
