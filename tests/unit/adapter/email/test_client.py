"""Unit tests for the transactional email clients."""

import json

import httpx
import pytest

from kin.adapter.email import BrevoNotifier, EmailNotifier, RecordingNotifier
from kin.adapter.error import EmailDeliveryError
from kin.config import EmailSettings
from kin.domain.service import dispatch_notification


@pytest.fixture
def brevo_requests(monkeypatch):
    """Route Brevo calls to a mock transport and collect the requests."""
    captured: list[httpx.Request] = []
    responses = {"status": 201}
    real_client = httpx.AsyncClient

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(responses["status"], json={"messageId": "abc"})

    def client_factory(*args, **kwargs):
        return real_client(transport=httpx.MockTransport(handler))

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)
    return captured, responses


def _brevo() -> BrevoNotifier:
    return BrevoNotifier(
        settings=EmailSettings(brevo_api_key="test-key"),
        verification_url="https://kin.family/verify-email",
        invite_url="https://kin.family/join",
    )


class TestBrevoNotifier:
    """Tests for BrevoNotifier."""

    @pytest.mark.asyncio
    async def test_verification_email_payload(self, brevo_requests):
        # Arrange
        captured, _ = brevo_requests

        # Act
        await _brevo().send_verification_email("bob@example.com", "Bob", "tok_123")

        # Assert
        assert len(captured) == 1
        request = captured[0]
        assert request.headers["api-key"] == "test-key"
        body = json.loads(request.content)
        assert body["to"] == [{"email": "bob@example.com", "name": "Bob"}]
        assert body["sender"]["email"] == "noreply@kin.family"
        assert "https://kin.family/verify-email?token=tok_123" in body["htmlContent"]
        assert body["tags"] == ["verification"]

    @pytest.mark.asyncio
    async def test_rejection_raises_delivery_error(self, brevo_requests):
        _, responses = brevo_requests
        responses["status"] = 401

        with pytest.raises(EmailDeliveryError, match="401"):
            await _brevo().send_invite_notification(
                "bob@example.com", "Alice", "The Smiths", "INV-AAAA-BBBB-CCCC"
            )

    @pytest.mark.asyncio
    async def test_names_are_escaped(self, brevo_requests):
        captured, _ = brevo_requests

        await _brevo().send_invite_notification(
            "bob@example.com", "<script>", "The Smiths", "INV-AAAA-BBBB-CCCC"
        )

        body = json.loads(captured[0].content)
        assert "<script>" not in body["htmlContent"]
        assert "&lt;script&gt;" in body["htmlContent"]


class TestDispatchNotification:
    """Tests for dispatch_notification()."""

    @pytest.mark.asyncio
    async def test_failure_is_absorbed(self):
        """A failed send should be logged, not raised."""
        notifier = RecordingNotifier()
        notifier.fail = True

        sent = await dispatch_notification(
            notifier.send_verification_email("bob@example.com", "Bob", "tok"),
            "verification_email",
        )

        assert sent is False
        assert notifier.sent == []

    @pytest.mark.asyncio
    async def test_success_is_recorded(self):
        notifier = RecordingNotifier()

        sent = await dispatch_notification(
            notifier.send_registration_invite(
                "bob@example.com", "Alice", "The Smiths", "INV-AAAA-BBBB-CCCC", "de"
            ),
            "registration_invite",
        )

        assert sent is True
        assert len(notifier.sent_to("bob@example.com", "registration")) == 1


class TestEmailNotifier:
    """Tests for the EmailNotifier base."""

    def test_delivery_must_be_implemented(self):
        class Incomplete(EmailNotifier):
            pass

        with pytest.raises(TypeError):
            Incomplete(
                verification_url="https://kin.family/verify-email",
                invite_url="https://kin.family/join",
            )
