import base64
import json

import httpx
import pytest

from intake.export.exceptions import ChannelDeliveryError, UnverifiedSender
from intake.export.models import EmailMessage, ExportArtifact
from intake.export.sendgrid_email_adapter import SendGridEmailChannel


def _message(**overrides: object) -> EmailMessage:
    values: dict[str, object] = {
        "transmission_id": "tx-1",
        "to": "dr.smith@clinic.example",
        "cc": [],
        "subject": "Referral",
        "body": "Please see attached.",
        "attachments": [
            ExportArtifact(filename="doc.txt", content_type="text/plain", content=b"hello")
        ],
    }
    values.update(overrides)
    return EmailMessage(**values)  # type: ignore[arg-type]


def _channel(handler) -> SendGridEmailChannel:  # type: ignore[no-untyped-def]
    return SendGridEmailChannel(
        api_key="SG.key",
        sender_address="noreply@intake.example",
        sender_name="Intake",
        api_url="https://sendgrid.test/v3/mail/send",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


class TestSendGridEmailChannel:
    def test_posts_v3_payload(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(202, headers={"X-Message-Id": "sg-123"})

        receipt = _channel(handler).send(_message(cc=["nurse@clinic.example"]))

        assert receipt.reference == "sg-123"
        assert receipt.status == "accepted"
        request = captured[0]
        assert request.headers["Authorization"] == "Bearer SG.key"
        payload = json.loads(request.content)
        assert payload["personalizations"][0]["to"] == [{"email": "dr.smith@clinic.example"}]
        assert payload["personalizations"][0]["cc"] == [{"email": "nurse@clinic.example"}]
        assert payload["from"]["email"] == "noreply@intake.example"
        assert payload["custom_args"] == {"transmission_id": "tx-1"}
        attachment = payload["attachments"][0]
        assert attachment["filename"] == "doc.txt"
        assert base64.b64decode(attachment["content"]) == b"hello"

    def test_falls_back_to_transmission_id_reference(self) -> None:
        receipt = _channel(lambda request: httpx.Response(202)).send(_message())
        assert receipt.reference == "tx-1"

    def test_unverified_sender(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                403,
                json={
                    "errors": [
                        {
                            "message": "The from address does not match a verified "
                            "Sender Identity."
                        }
                    ]
                },
            )

        with pytest.raises(UnverifiedSender) as exc_info:
            _channel(handler).send(_message())

        assert exc_info.value.reason == "unverified-sender"

    def test_other_forbidden_is_delivery_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"errors": [{"message": "access forbidden"}]})

        with pytest.raises(ChannelDeliveryError, match="403"):
            _channel(handler).send(_message())

    def test_server_error(self) -> None:
        with pytest.raises(ChannelDeliveryError, match="500"):
            _channel(lambda request: httpx.Response(500, text="boom")).send(_message())

    def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ChannelDeliveryError, match="network error"):
            _channel(handler).send(_message())
