"""Tests for ExampleClientAdapter (template/reference adapter)."""

import json

import pytest

from intake.analysis.example_client_adapter import ExampleClientAdapter
from intake.analysis.validator import build_classification, build_medical_info


def _call(schema_name: str) -> str:
    return ExampleClientAdapter().create_chat_completion(
        model="any",
        temperature=0.0,
        system_prompt="sys",
        user_prompt="user",
        schema_name=schema_name,
        json_schema={"type": "object"},
    )


class TestExampleClientAdapter:
    def test_classification_response_validates(self) -> None:
        result = build_classification(json.loads(_call("document_classification")))
        assert result.document_type == "general_medical"
        assert result.confidence == 0.5

    def test_medical_response_validates(self) -> None:
        info = build_medical_info(json.loads(_call("medical_entities")))
        assert info.diagnoses == []
        assert info.vital_signs is None

    def test_unknown_schema_raises(self) -> None:
        with pytest.raises(KeyError):
            _call("something_else")
