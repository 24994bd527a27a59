"""
Outbound email senders.

Senders never raise for a delivery problem: they return a DeliveryResult
carrying the reason, and the queue decides what to do with it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from config.settings import settings
from notifications.templates import RenderedEmail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    success: bool
    error: Optional[str] = None
    provider_message_id: Optional[str] = None


class EmailSender:
    """Base class for email delivery backends."""

    def send(self, recipient: str, email: RenderedEmail) -> DeliveryResult:
        raise NotImplementedError


class LoggingEmailSender(EmailSender):
    """Writes emails to the application log instead of delivering them."""

    def send(self, recipient: str, email: RenderedEmail) -> DeliveryResult:
        logger.info(f"[email:{email.template_id}] to={recipient} subject={email.subject!r}")
        return DeliveryResult(success=True)


class HttpEmailSender(EmailSender):
    """Delivers through a transactional email provider's JSON HTTP API."""

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        from_address: str = "no-reply@hiring.local",
        timeout: int = 10,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.from_address = from_address
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, recipient: str, email: RenderedEmail) -> DeliveryResult:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = {
            "from": self.from_address,
            "to": recipient,
            "subject": email.subject,
            "text": email.body,
            "tags": [email.template_id],
        }

        try:
            response = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Email provider request failed for {recipient}: {e}")
            return DeliveryResult(success=False, error=f"request failed: {e}")

        if response.status_code >= 400:
            logger.warning(f"Email provider rejected message to {recipient}: HTTP {response.status_code}")
            return DeliveryResult(success=False, error=f"HTTP {response.status_code}: {response.text[:200]}")

        message_id = None
        try:
            body = response.json()
        except ValueError:
            body = None  # provider returned no JSON body
        if isinstance(body, dict):
            message_id = body.get("id")

        return DeliveryResult(success=True, provider_message_id=message_id)


def get_email_sender() -> EmailSender:
    """Build the sender selected by EMAIL_PROVIDER."""
    if settings.EMAIL_PROVIDER == "http":
        if not settings.EMAIL_PROVIDER_URL:
            raise ValueError("EMAIL_PROVIDER_URL is required when EMAIL_PROVIDER=http")
        return HttpEmailSender(
            url=settings.EMAIL_PROVIDER_URL,
            api_key=settings.EMAIL_PROVIDER_API_KEY,
            from_address=settings.EMAIL_FROM_ADDRESS,
            timeout=settings.EMAIL_TIMEOUT_SECONDS,
        )
    return LoggingEmailSender()
