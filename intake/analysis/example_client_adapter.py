"""Example reasoning client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseReasoningClient and register the provider in
ClassificationCapabilityFactory.
"""

import json
from typing import ClassVar

from intake.analysis.client_base import BaseReasoningClient


class ExampleClientAdapter(BaseReasoningClient):
    """Example adapter that returns fixed, schema-valid JSON per task.

    No network calls. Useful for local development and tests.
    """

    RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "document_classification": {
            "documentType": "general_medical",
            "confidence": 0.5,
            "summary": "Example classification; no reasoning provider configured.",
            "keyData": {
                "urgent": False,
                "requiresFollowUp": False,
                "documentDate": None,
                "keyPoints": [],
            },
        },
        "medical_entities": {
            "patientName": None,
            "patientId": None,
            "dateOfBirth": None,
            "diagnosis": [],
            "medications": [],
            "procedures": [],
            "allergies": [],
            "vitalSigns": None,
        },
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        schema_name: str,
        json_schema: dict[str, object],
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, json_schema
        return json.dumps(self.RESPONSES[schema_name])
