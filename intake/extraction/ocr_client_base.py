from abc import ABC, abstractmethod


class BaseOcrClient(ABC):
    """Contract for provider-specific vision text-extraction clients."""

    @abstractmethod
    def extract_text(self, image_bytes: bytes, mime_type: str) -> str:
        """Return the text visible in the image.

        Raises:
            CapabilityError: on provider failures or empty responses.
        """
