"""Example channel adapters.

Use this module as a reference when implementing new delivery providers.
Implement BaseEmailChannel or BaseFaxChannel and register the provider in
ChannelFactory. Nothing leaves the process; messages are kept in memory.
"""

from intake.export.email_channel_base import BaseEmailChannel
from intake.export.fax_channel_base import BaseFaxChannel
from intake.export.models import DeliveryReceipt, EmailMessage, FaxJob
from intake.logging.logger import Log


class ExampleEmailChannel(BaseEmailChannel):
    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []

    def send(self, message: EmailMessage) -> DeliveryReceipt:
        self.sent.append(message)
        Log.info(
            "[example] email accepted",
            transmission_id=message.transmission_id,
            attachments=len(message.attachments),
        )
        return DeliveryReceipt(reference=f"EMAIL_{message.transmission_id}")


class ExampleFaxChannel(BaseFaxChannel):
    def __init__(self) -> None:
        self.sent: list[FaxJob] = []

    def send(self, job: FaxJob) -> DeliveryReceipt:
        self.sent.append(job)
        Log.info(
            "[example] fax queued",
            transmission_id=job.transmission_id,
            priority=job.priority.value,
        )
        return DeliveryReceipt(reference=f"FAX_{job.transmission_id}", status="queued")
