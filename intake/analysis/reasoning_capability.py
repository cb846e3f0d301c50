"""Classification and medical-entity extraction backed by a reasoning provider."""

from pathlib import Path

from intake.analysis.capability import BaseClassificationCapability
from intake.analysis.client_base import BaseReasoningClient
from intake.analysis.prompt_loader import load_prompt_bundle
from intake.analysis.validator import (
    build_classification,
    build_medical_info,
    parse_json_object,
)
from intake.logging.logger import Log
from intake.processor.models import DocumentClassification, MedicalInfo

DEFAULT_SYSTEM_PROMPT = (
    "You are a medical document analysis assistant for a healthcare intake "
    "service. Answer only with JSON that matches the requested schema."
)


class ReasoningCapability(BaseClassificationCapability):
    """Runs the classification and medical prompts through a reasoning client."""

    CLASSIFICATION_SCHEMA_NAME = "document_classification"
    MEDICAL_SCHEMA_NAME = "medical_entities"

    def __init__(
        self,
        *,
        client: BaseReasoningClient,
        model: str,
        temperature: float = 0.0,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        prompt_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = system_prompt
        self._classification = load_prompt_bundle("classification", prompt_dir)
        self._medical = load_prompt_bundle("medical", prompt_dir)

    def classify(self, text: str, filename: str) -> DocumentClassification:
        prompt = self._classification.template.format(
            filename=filename,
            document_text=text,
            json_schema=self._classification.schema_text,
        )
        raw = self._call(prompt, self.CLASSIFICATION_SCHEMA_NAME, self._classification.schema)
        classification = build_classification(parse_json_object(raw))
        Log.info(
            "Classification complete",
            document_type=classification.document_type,
            confidence=classification.confidence,
        )
        return classification

    def extract_medical_entities(self, text: str) -> MedicalInfo:
        prompt = self._medical.template.format(
            document_text=text,
            json_schema=self._medical.schema_text,
        )
        raw = self._call(prompt, self.MEDICAL_SCHEMA_NAME, self._medical.schema)
        info = build_medical_info(parse_json_object(raw))
        Log.info(
            "Medical entity extraction complete",
            diagnoses=len(info.diagnoses),
            medications=len(info.medications),
        )
        return info

    def _call(self, prompt: str, schema_name: str, schema: dict[str, object]) -> str:
        Log.debug(f"Reasoning prompt ({schema_name}):\n{prompt}")
        raw = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            schema_name=schema_name,
            json_schema=schema,
        )
        Log.debug(f"Reasoning raw response ({schema_name}):\n{raw}")
        return raw
