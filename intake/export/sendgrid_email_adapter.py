import base64
from typing import Any

import httpx

from intake.export.email_channel_base import BaseEmailChannel
from intake.export.exceptions import ChannelDeliveryError, UnverifiedSender
from intake.export.models import DeliveryReceipt, EmailMessage

_UNVERIFIED_SENDER_MARKER = "verified sender identity"


class SendGridEmailChannel(BaseEmailChannel):
    """Email delivery through the SendGrid v3 mail/send HTTP API."""

    def __init__(
        self,
        *,
        api_key: str,
        sender_address: str,
        sender_name: str,
        api_url: str = "https://api.sendgrid.com/v3/mail/send",
        timeout_seconds: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_url = api_url
        self._sender_address = sender_address
        self._sender_name = sender_name
        self._client = http_client or httpx.Client(timeout=timeout_seconds)
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def send(self, message: EmailMessage) -> DeliveryReceipt:
        try:
            response = self._client.post(
                self._api_url, json=self._build_payload(message), headers=self._headers
            )
        except httpx.HTTPError as exc:
            raise ChannelDeliveryError(f"SendGrid network error: {exc}") from exc

        if response.status_code == 403 and _UNVERIFIED_SENDER_MARKER in _error_text(response):
            raise UnverifiedSender(
                f"SendGrid rejected sender {self._sender_address}: {_error_text(response)}"
            )
        if response.status_code >= 400:
            raise ChannelDeliveryError(
                f"SendGrid API error {response.status_code}: {_error_text(response)}"
            )
        return DeliveryReceipt(
            reference=response.headers.get("X-Message-Id", message.transmission_id),
            status="accepted",
        )

    def _build_payload(self, message: EmailMessage) -> dict[str, Any]:
        personalization: dict[str, Any] = {"to": [{"email": message.to}]}
        if message.cc:
            personalization["cc"] = [{"email": address} for address in message.cc]
        payload: dict[str, Any] = {
            "personalizations": [personalization],
            "from": {"email": self._sender_address, "name": self._sender_name},
            "subject": message.subject,
            "content": [{"type": "text/plain", "value": message.body}],
            "custom_args": {"transmission_id": message.transmission_id},
        }
        if message.attachments:
            payload["attachments"] = [
                {
                    "content": base64.b64encode(artifact.content).decode("ascii"),
                    "type": artifact.content_type,
                    "filename": artifact.filename,
                    "disposition": "attachment",
                }
                for artifact in message.attachments
            ]
        return payload


def _error_text(response: httpx.Response) -> str:
    """Join SendGrid's ``errors[].message`` entries, falling back to the raw body."""
    try:
        data = response.json()
    except ValueError:
        return response.text.lower()
    errors = data.get("errors") if isinstance(data, dict) else None
    if not errors:
        return response.text.lower()
    return "; ".join(str(error.get("message", "")) for error in errors).lower()
