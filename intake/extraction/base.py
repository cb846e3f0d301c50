from abc import ABC, abstractmethod


class BaseExtractionStrategy(ABC):
    """Contract for all format-specific text extraction strategies."""

    name: str = "base"

    @abstractmethod
    def extract(self, data: bytes, mime_type: str) -> str:
        """Extract plain text from document bytes.

        Args:
            data: Raw staged file content.
            mime_type: Declared MIME type of the submission.

        Returns:
            Extracted text as a single normalized string.

        Raises:
            ExtractionError: if extraction fails for any reason.
        """
