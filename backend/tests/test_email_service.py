"""Tests for the email sink providers."""

import httpx
import pytest

from backoffice.core.config import settings
from backoffice.services.email_service import EmailDeliveryError, EmailService


def test_dev_provider_only_logs():
    result = EmailService(provider="dev").send("a@b.com", "Hello", "<p>Hi</p>")
    assert result == {"provider": "dev", "target": "a@b.com"}


@pytest.mark.parametrize("recipient", [None, "", "   ", 42])
def test_recipient_must_be_non_empty_string(recipient):
    with pytest.raises(ValueError):
        EmailService(provider="dev").send(recipient, "Hello", "<p>Hi</p>")


@pytest.fixture
def mailgun_settings(monkeypatch):
    monkeypatch.setattr(settings, "MAILGUN_API_KEY", "key-123")
    monkeypatch.setattr(settings, "MAILGUN_DOMAIN", "mg.example.com")
    monkeypatch.setattr(settings, "MAILGUN_API_BASE_URL", "https://api.mailgun.test/")


def test_mailgun_posts_completion_notice(mailgun_settings):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["authorization"]
        captured["body"] = request.content.decode()
        return httpx.Response(200, json={"id": "<msg-1@mg>", "message": "Queued"})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    result = EmailService(provider="mailgun", client=client).send_completion_notice("c@d.com", "GST Filing")

    assert result["provider"] == "mailgun"
    assert result["id"] == "<msg-1@mg>"
    assert captured["url"] == "https://api.mailgun.test/v3/mg.example.com/messages"
    assert captured["auth"].startswith("Basic ")
    assert "Great+News%21+Your+GST+Filing+is+completed%21" in captured["body"]


def test_mailgun_error_status_raises(mailgun_settings):
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(401, text="Forbidden")))

    with pytest.raises(EmailDeliveryError):
        EmailService(provider="mailgun", client=client).send("c@d.com", "s", "h")


def test_mailgun_requires_configuration(monkeypatch):
    monkeypatch.setattr(settings, "MAILGUN_API_KEY", "")
    with pytest.raises(EmailDeliveryError):
        EmailService(provider="mailgun").send("c@d.com", "s", "h")


def test_unknown_provider_raises():
    with pytest.raises(EmailDeliveryError):
        EmailService(provider="pigeon").send("c@d.com", "s", "h")


def test_default_work_label():
    sent = []

    class Recorder(EmailService):
        def send(self, to, subject, html):
            sent.append(subject)
            return {}

    Recorder(provider="dev").send_completion_notice("c@d.com")
    assert sent == ["Great News! Your work is completed!"]


def test_mailgun_plain_text_acceptance_is_a_send(mailgun_settings):
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, text="Queued. Thank you.")))

    result = EmailService(provider="mailgun", client=client).send("c@d.com", "s", "h")

    assert result == {"provider": "mailgun", "target": "c@d.com", "id": None}
