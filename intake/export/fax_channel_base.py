from abc import ABC, abstractmethod

from intake.export.models import DeliveryReceipt, FaxJob


class BaseFaxChannel(ABC):
    """Contract for fax delivery providers."""

    @abstractmethod
    def send(self, job: FaxJob) -> DeliveryReceipt:
        """Queue the fax with the provider.

        Returns:
            DeliveryReceipt whose ``reference`` is the provider fax job id.

        Raises:
            UnverifiedSender: if the provider rejects the sending number.
            ChannelDeliveryError: on any other delivery failure.
        """
