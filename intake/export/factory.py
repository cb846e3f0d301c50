from intake.config.settings import Settings
from intake.export.email_channel_base import BaseEmailChannel
from intake.export.example_channel_adapters import ExampleEmailChannel, ExampleFaxChannel
from intake.export.fax_channel_base import BaseFaxChannel
from intake.export.http_fax_adapter import HttpFaxChannel
from intake.export.sendgrid_email_adapter import SendGridEmailChannel


class ChannelFactory:
    """Creates the configured email and fax channels."""

    @classmethod
    def create_email_channel(cls, settings: Settings) -> BaseEmailChannel:
        provider = settings.email_provider.lower()
        if provider == "example":
            return ExampleEmailChannel()
        if provider == "sendgrid":
            return SendGridEmailChannel(
                api_key=settings.sendgrid_api_key,
                sender_address=settings.email_sender_address,
                sender_name=settings.email_sender_name,
                api_url=settings.sendgrid_api_url,
                timeout_seconds=settings.capability_timeout_seconds,
            )
        raise ValueError(f"Unknown email provider '{provider}'. Choose from: ['example', 'sendgrid']")

    @classmethod
    def create_fax_channel(cls, settings: Settings) -> BaseFaxChannel:
        provider = settings.fax_provider.lower()
        if provider == "example":
            return ExampleFaxChannel()
        if provider == "http":
            return HttpFaxChannel(
                api_url=settings.fax_api_url,
                api_key=settings.fax_api_key,
                sender_number=settings.fax_sender_number,
                timeout_seconds=settings.capability_timeout_seconds,
            )
        raise ValueError(f"Unknown fax provider '{provider}'. Choose from: ['example', 'http']")
