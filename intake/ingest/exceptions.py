class IngestError(Exception):
    """Base exception for uploads rejected at ingress."""


class PayloadTooLarge(IngestError):
    """Raised when an upload exceeds the configured size ceiling."""

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        super().__init__(f"Upload of {size_bytes} bytes exceeds the {limit_bytes} byte limit")
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class UnsupportedFormat(IngestError):
    """Raised when the declared MIME type is not in the allow-list."""

    def __init__(self, mime_type: str) -> None:
        super().__init__(f"Unsupported document format '{mime_type}'")
        self.mime_type = mime_type
