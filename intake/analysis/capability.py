from abc import ABC, abstractmethod

from intake.processor.models import DocumentClassification, MedicalInfo


class BaseClassificationCapability(ABC):
    """The external classification/extraction capability.

    Concrete adapters wrap a reasoning provider; tests substitute
    deterministic stubs.
    """

    @abstractmethod
    def classify(self, text: str, filename: str) -> DocumentClassification:
        """Classify the document and summarise it.

        Raises:
            CapabilityError: on provider failure or malformed output.
        """

    @abstractmethod
    def extract_medical_entities(self, text: str) -> MedicalInfo:
        """Extract structured medical entities from the document text.

        Raises:
            CapabilityError: on provider failure or malformed output.
        """
