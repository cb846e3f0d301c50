from abc import ABC, abstractmethod

from intake.export.models import DeliveryReceipt, EmailMessage


class BaseEmailChannel(ABC):
    """Contract for email delivery providers."""

    @abstractmethod
    def send(self, message: EmailMessage) -> DeliveryReceipt:
        """Hand the message to the provider.

        Returns:
            DeliveryReceipt whose ``reference`` is the provider message id.

        Raises:
            UnverifiedSender: if the provider rejects the sender identity.
            ChannelDeliveryError: on any other delivery failure.
        """
