from unittest.mock import MagicMock

import pytest

from intake.export.example_channel_adapters import ExampleEmailChannel, ExampleFaxChannel
from intake.export.factory import ChannelFactory
from intake.export.http_fax_adapter import HttpFaxChannel
from intake.export.sendgrid_email_adapter import SendGridEmailChannel


def _settings(**overrides: object) -> MagicMock:
    values = {
        "email_provider": "example",
        "fax_provider": "example",
        "sendgrid_api_key": "SG.key",
        "sendgrid_api_url": "https://api.sendgrid.com/v3/mail/send",
        "email_sender_address": "noreply@example.org",
        "email_sender_name": "Document Intake",
        "fax_api_url": "https://fax.test",
        "fax_api_key": "k",
        "fax_sender_number": "+15550000000",
        "capability_timeout_seconds": 10.0,
    }
    values.update(overrides)
    return MagicMock(**values)


class TestChannelFactory:
    def test_example_channels(self) -> None:
        settings = _settings()
        assert isinstance(ChannelFactory.create_email_channel(settings), ExampleEmailChannel)
        assert isinstance(ChannelFactory.create_fax_channel(settings), ExampleFaxChannel)

    def test_sendgrid_channel(self) -> None:
        channel = ChannelFactory.create_email_channel(_settings(email_provider="SendGrid"))
        assert isinstance(channel, SendGridEmailChannel)

    def test_http_fax_channel(self) -> None:
        channel = ChannelFactory.create_fax_channel(_settings(fax_provider="http"))
        assert isinstance(channel, HttpFaxChannel)

    def test_unknown_email_provider(self) -> None:
        with pytest.raises(ValueError, match="Unknown email provider"):
            ChannelFactory.create_email_channel(_settings(email_provider="pigeon"))

    def test_unknown_fax_provider(self) -> None:
        with pytest.raises(ValueError, match="Unknown fax provider"):
            ChannelFactory.create_fax_channel(_settings(fax_provider="telex"))
