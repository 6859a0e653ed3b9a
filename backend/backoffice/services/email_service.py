from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from backoffice.core.config import settings
from backoffice.core.logger import logger


COMPLETION_SUBJECT = "Great News! Your {work} is completed!"

COMPLETION_HTML = """
Dear Valued Customer,
<p>We're thrilled to announce that your {work} has been successfully completed!</p>
<p>Please let us know if you have any questions or require further assistance.</p>
<p>Thank you,<br/>Truzly India - Team</p>
<p>This is an auto-generated email.</p>
"""


class EmailDeliveryError(Exception):
    """Raised when the configured provider refuses or fails a send"""


def _message_id(resp: httpx.Response) -> Optional[str]:
    """Mailgun's queued-message id; a 2xx without a JSON body is still a send."""
    try:
        body = resp.json()
    except ValueError:
        logger.warning("Mailgun accepted the message without a JSON body")
        return None
    return body.get("id") if isinstance(body, dict) else None


class EmailService:
    """Outbound email with a provider toggle (dev logs only, mailgun sends)."""

    def __init__(
        self,
        provider: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.provider = (provider or settings.EMAIL_PROVIDER or "dev").strip().lower()
        self._client = client

    def _post(self, url: str, **kwargs: Any) -> httpx.Response:
        if self._client is not None:
            return self._client.post(url, **kwargs)
        with httpx.Client(timeout=settings.EMAIL_TIMEOUT_SECONDS) as client:
            return client.post(url, **kwargs)

    def send(self, to: Any, subject: str, html: str) -> Dict[str, Any]:
        if not isinstance(to, str) or not to.strip():
            raise ValueError("Missing or invalid recipient address")
        target = to.strip()
        provider = self.provider
        if provider == "dev":
            logger.info("[DEV EMAIL] to=%s subject=%s", target, subject)
            return {"provider": "dev", "target": target}
        if provider == "mailgun":
            api_key = (settings.MAILGUN_API_KEY or "").strip()
            domain = (settings.MAILGUN_DOMAIN or "").strip()
            if not api_key or not domain:
                raise EmailDeliveryError("Mailgun config missing (MAILGUN_API_KEY/MAILGUN_DOMAIN)")
            base_url = settings.MAILGUN_API_BASE_URL.rstrip("/")
            data = {
                "from": settings.EMAIL_FROM,
                "to": [target],
                "subject": subject,
                "html": html,
            }
            try:
                resp = self._post(f"{base_url}/v3/{domain}/messages", data=data, auth=("api", api_key))
            except httpx.HTTPError as e:
                raise EmailDeliveryError(f"Mailgun request failed: {str(e)}") from e
            if resp.status_code >= 400:
                raise EmailDeliveryError(f"Mailgun email failed: {resp.status_code} {resp.text[:200]}")
            logger.info("Email sent to %s via mailgun", target)
            return {"provider": "mailgun", "target": target, "id": _message_id(resp)}
        raise EmailDeliveryError(f"Unsupported EMAIL_PROVIDER: {provider}")

    def send_completion_notice(self, to: Any, nature_of_work: Any = None) -> Dict[str, Any]:
        work = nature_of_work or "work"
        return self.send(
            to,
            COMPLETION_SUBJECT.format(work=work),
            COMPLETION_HTML.format(work=work),
        )


email_service = EmailService()
