"""
Outbound mail transport.

Notification emails are delivered through the Resend ``emails`` API. The
transport only reports delivered / not delivered (MailTransportError); it does
not retry.
"""

import logging
from typing import Dict, Optional, Protocol

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"

# Headers Resend derives itself from the payload
_RESERVED_HEADERS = {"from", "reply-to", "mime-version", "content-type"}


class OutboundEmail(BaseModel):
    """A ready-to-send HTML email."""

    sender: str
    to: str
    subject: str
    body: str
    headers: Dict[str, str] = {}

    def header_block(self) -> str:
        """Headers rendered as a CRLF-terminated block, as they go on the wire."""
        return "".join(f"{key}: {value}\r\n" for key, value in self.headers.items())


class MailTransportError(Exception):
    """The email could not be handed over for delivery."""


class MailTransport(Protocol):
    def send(self, message: OutboundEmail) -> None:
        ...


class ResendTransport:
    """Send emails through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def send(self, message: OutboundEmail) -> None:
        payload = {
            "from": message.sender,
            "to": [message.to],
            "subject": message.subject,
            "html": message.body,
        }

        reply_to = message.headers.get("Reply-To")
        if reply_to:
            payload["reply_to"] = reply_to

        extra = {
            key: value
            for key, value in message.headers.items()
            if key.lower() not in _RESERVED_HEADERS
        }
        if extra:
            payload["headers"] = extra

        try:
            response = self._http.post(
                RESEND_API_URL,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
        except httpx.HTTPError as exc:
            raise MailTransportError(f"Resend request failed: {exc}") from exc

        if response.status_code >= 300:
            raise MailTransportError(
                f"Failed to send email: {response.status_code} - {response.text}"
            )

        logger.info("Notification email sent: %s", message.subject)
