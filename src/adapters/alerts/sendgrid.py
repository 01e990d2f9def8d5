"""
SendGrid alert sender adapter - Implements AlertSender protocol.

Delivers alerts through the SendGrid v3 ``mail/send`` endpoint using an
async httpx client. Failed deliveries raise; retrying is not attempted.
"""

import logging
from typing import Any

import httpx

from src.domain.ports import AlertMessage

logger = logging.getLogger(__name__)

SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"


class AlertDeliveryError(Exception):
    """SendGrid rejected the alert."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"SendGrid returned {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class SendGridAlertSender:
    """
    Implements AlertSender protocol via the SendGrid HTTP API.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = SENDGRID_API_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        """
        Initialize sender.

        Args:
            api_key: SendGrid API key
            api_url: mail/send endpoint
            client: Shared client; one is created when omitted
            timeout: Request timeout in seconds for the created client
        """
        self._api_key = api_key
        self._api_url = api_url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def send(self, message: AlertMessage) -> None:
        """
        POST the alert to SendGrid.

        Raises:
            AlertDeliveryError: On a non-2xx response
            httpx.HTTPError: On transport failures
        """
        response = await self._client.post(
            self._api_url,
            json=build_payload(message),
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        if response.is_error:
            raise AlertDeliveryError(response.status_code, response.text)

        logger.info("Alert delivered to %s (status=%s)", message.to, response.status_code)

    async def aclose(self) -> None:
        """Close the HTTP client if this sender created it."""
        if self._owns_client:
            await self._client.aclose()


def build_payload(message: AlertMessage) -> dict[str, Any]:
    """Convert an AlertMessage to a SendGrid v3 request body."""
    return {
        "personalizations": [{"to": [{"email": message.to}]}],
        "from": {"email": message.sender},
        "subject": message.subject,
        "content": [
            {"type": "text/plain", "value": message.text},
            {"type": "text/html", "value": message.html},
        ],
    }
