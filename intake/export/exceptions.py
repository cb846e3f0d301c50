from intake.processor.models import TransmissionChannel, TransmissionRecord


class ChannelError(Exception):
    """Base exception for email and fax channel failures."""

    reason = "channel-error"


class UnverifiedSender(ChannelError):
    """Raised when the provider refuses the sender identity.

    Operators must verify the sender out-of-band before retrying.
    """

    reason = "unverified-sender"


class ChannelDeliveryError(ChannelError):
    """Raised when the provider could not be reached or rejected the delivery."""

    reason = "delivery-failed"


class ExportUnavailable(Exception):
    """Raised when the requested export cannot be produced."""


class TransmissionFailed(Exception):
    """Raised to the caller of a failed email or fax transmission.

    The failed attempt has already been recorded; ``record`` is that row.
    """

    def __init__(
        self,
        channel: TransmissionChannel,
        reason: str,
        record: TransmissionRecord,
        detail: str = "",
    ) -> None:
        self.channel = channel
        self.reason = reason
        self.record = record
        self.detail = detail
        message = f"{channel.value} transmission {record.id} failed: {reason}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
