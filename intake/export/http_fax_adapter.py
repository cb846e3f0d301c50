import base64
from typing import Any

import httpx

from intake.export.exceptions import ChannelDeliveryError, UnverifiedSender
from intake.export.fax_channel_base import BaseFaxChannel
from intake.export.models import DeliveryReceipt, FaxJob

_UNVERIFIED_SENDER_CODES = frozenset({"sender_not_verified", "unverified_sender"})


class HttpFaxChannel(BaseFaxChannel):
    """Fax delivery through a JSON-over-HTTP fax gateway.

    The gateway accepts ``POST {api_url}/faxes`` and answers with the fax job
    id. A 403 with an unverified-sender error code is reported separately
    from other failures.
    """

    def __init__(
        self,
        *,
        api_url: str,
        api_key: str,
        sender_number: str,
        timeout_seconds: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not api_url:
            raise ValueError("fax_api_url is required for fax_provider=http")
        self._endpoint = f"{api_url.rstrip('/')}/faxes"
        self._sender_number = sender_number
        self._client = http_client or httpx.Client(timeout=timeout_seconds)
        self._headers = {"Authorization": f"Bearer {api_key}"}

    def send(self, job: FaxJob) -> DeliveryReceipt:
        try:
            response = self._client.post(
                self._endpoint, json=self._build_payload(job), headers=self._headers
            )
        except httpx.HTTPError as exc:
            raise ChannelDeliveryError(f"Fax gateway network error: {exc}") from exc

        body = _json_body(response)
        if response.status_code == 403 and body.get("code") in _UNVERIFIED_SENDER_CODES:
            raise UnverifiedSender(f"Fax gateway rejected sender {self._sender_number}")
        if response.status_code >= 400:
            detail = body.get("message") or response.text
            raise ChannelDeliveryError(f"Fax gateway error {response.status_code}: {detail}")

        fax_id = body.get("id")
        if not fax_id:
            raise ChannelDeliveryError("Fax gateway response has no job id")
        return DeliveryReceipt(reference=str(fax_id), status=str(body.get("status", "queued")))

    def _build_payload(self, job: FaxJob) -> dict[str, Any]:
        return {
            "to": job.recipient_number,
            "to_name": job.recipient_name,
            "from": self._sender_number,
            "priority": job.priority.value,
            "cover_sheet": job.cover_sheet,
            "client_reference": job.transmission_id,
            "document": {
                "filename": job.document.filename,
                "content_type": job.document.content_type,
                "content_base64": base64.b64encode(job.document.content).decode("ascii"),
            },
        }


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
