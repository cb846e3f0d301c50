"""Content inspectors used by the security scanner.

Each inspector declares which MIME types it applies to and returns threat
labels for the staged bytes. New binary-format checks are added by
registering another inspector with the scanner.
"""

import re
from abc import ABC, abstractmethod
from typing import ClassVar


class ThreatLabel:
    FILE_SIZE_EXCEEDS_LIMIT = "file-size-exceeds-limit"
    DECLARED_SIZE_MISMATCH = "declared-size-mismatch"
    STAGED_FILE_MISSING = "staged-file-missing"
    SCRIPT_TAG = "script-tag"
    INLINE_EVENT_HANDLER = "inline-event-handler"
    SCRIPT_URI = "script-uri"
    FORMAT_SIGNATURE_MISMATCH = "format-signature-mismatch"
    PDF_ACTIVE_CONTENT = "pdf-active-content"
    SCAN_ERROR = "scan-error"


class BaseContentInspector(ABC):
    """Contract for format-specific content checks."""

    @abstractmethod
    def applies_to(self, mime_type: str) -> bool:
        """Whether this inspector should run for the given MIME type."""

    @abstractmethod
    def inspect(self, data: bytes, mime_type: str) -> list[str]:
        """Return threat labels found in *data* (empty when clean)."""


class ScriptInjectionInspector(BaseContentInspector):
    """Looks for executable-script indicators in text-bearing formats."""

    _RULES: ClassVar[list[tuple[str, re.Pattern[str]]]] = [
        (ThreatLabel.SCRIPT_TAG, re.compile(r"<\s*script\b", re.IGNORECASE)),
        (
            ThreatLabel.INLINE_EVENT_HANDLER,
            re.compile(r"\bon(?:load|error|click|mouseover|focus|submit)\s*=", re.IGNORECASE),
        ),
        (ThreatLabel.SCRIPT_URI, re.compile(r"\b(?:javascript|vbscript)\s*:", re.IGNORECASE)),
    ]

    def applies_to(self, mime_type: str) -> bool:
        return mime_type.startswith("text/")

    def inspect(self, data: bytes, mime_type: str) -> list[str]:
        text = data.decode("utf-8", errors="replace")
        return [label for label, pattern in self._RULES if pattern.search(text)]


class FormatSignatureInspector(BaseContentInspector):
    """Rejects binary uploads whose leading bytes do not match the declared format."""

    SIGNATURES: ClassVar[dict[str, tuple[bytes, ...]]] = {
        "application/pdf": (b"%PDF-",),
        "image/png": (b"\x89PNG\r\n\x1a\n",),
        "image/jpeg": (b"\xff\xd8\xff",),
        "image/tiff": (b"II*\x00", b"MM\x00*"),
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document": (
            b"PK\x03\x04",
        ),
        "application/msword": (b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",),
    }

    def applies_to(self, mime_type: str) -> bool:
        return mime_type in self.SIGNATURES

    def inspect(self, data: bytes, mime_type: str) -> list[str]:
        if data.startswith(self.SIGNATURES[mime_type]):
            return []
        return [ThreatLabel.FORMAT_SIGNATURE_MISMATCH]


class PdfActiveContentInspector(BaseContentInspector):
    """Flags PDFs carrying embedded JavaScript or launch actions."""

    _ACTIVE_CONTENT_RE: ClassVar[re.Pattern[bytes]] = re.compile(
        rb"/(?:JavaScript|JS|Launch)(?![A-Za-z])"
    )

    def applies_to(self, mime_type: str) -> bool:
        return mime_type == "application/pdf"

    def inspect(self, data: bytes, mime_type: str) -> list[str]:
        if self._ACTIVE_CONTENT_RE.search(data):
            return [ThreatLabel.PDF_ACTIVE_CONTENT]
        return []


def default_inspectors() -> list[BaseContentInspector]:
    return [
        ScriptInjectionInspector(),
        FormatSignatureInspector(),
        PdfActiveContentInspector(),
    ]
