from dataclasses import dataclass, field
from enum import Enum


class ExportFormat(str, Enum):
    ORIGINAL = "original"
    SUMMARY = "summary"
    ANNOTATED = "annotated"


class FaxPriority(str, Enum):
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


@dataclass(frozen=True)
class ExportArtifact:
    """A downloadable or attachable rendition of a processed document."""

    filename: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class EmailParams:
    to: str
    subject: str
    message: str = ""
    cc: list[str] = field(default_factory=list)
    include_summary: bool = False
    encrypt_attachment: bool = False
    attachment_format: ExportFormat = ExportFormat.SUMMARY


@dataclass(frozen=True)
class FaxParams:
    recipient_number: str
    recipient_name: str | None = None
    cover_page: bool = True
    cover_message: str = ""
    priority: FaxPriority = FaxPriority.NORMAL
    document_format: ExportFormat = ExportFormat.SUMMARY


@dataclass(frozen=True)
class EmailMessage:
    """Fully assembled email handed to an email channel."""

    transmission_id: str
    to: str
    cc: list[str]
    subject: str
    body: str
    attachments: list[ExportArtifact]
    encrypt_attachment: bool = False


@dataclass(frozen=True)
class FaxJob:
    """Fully assembled fax handed to a fax channel."""

    transmission_id: str
    recipient_number: str
    recipient_name: str | None
    document: ExportArtifact
    cover_sheet: str | None = None
    priority: FaxPriority = FaxPriority.NORMAL


@dataclass(frozen=True)
class DeliveryReceipt:
    """What a channel reports back after accepting a delivery."""

    reference: str
    status: str = "accepted"
