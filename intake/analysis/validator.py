"""Strict decoding of reasoning-capability responses into typed results."""

import json
import math
from typing import Any

from intake.capabilities.exceptions import MalformedCapabilityResponse
from intake.processor.models import (
    DocumentClassification,
    MedicalInfo,
    VitalSigns,
    clamp_confidence,
)

_MAX_LIST_ITEMS = 100
_VITAL_FIELDS = {
    "bloodPressure": "blood_pressure",
    "heartRate": "heart_rate",
    "temperature": "temperature",
    "respiratoryRate": "respiratory_rate",
    "oxygenSaturation": "oxygen_saturation",
    "weight": "weight",
}


def parse_json_object(raw: str) -> dict[str, Any]:
    """Parse a provider reply, tolerating markdown code fences.

    Raises:
        MalformedCapabilityResponse: if the reply is not a JSON object.
    """
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedCapabilityResponse(f"Invalid JSON response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise MalformedCapabilityResponse("JSON response must be an object")
    return parsed


def build_classification(data: dict[str, Any]) -> DocumentClassification:
    """Validate a classification payload.

    Raises:
        MalformedCapabilityResponse: on any missing or mistyped field.
    """
    for field in ("documentType", "confidence", "summary", "keyData"):
        if field not in data:
            raise MalformedCapabilityResponse(f"Missing required field: {field}")

    document_type = data["documentType"]
    if not isinstance(document_type, str) or not document_type.strip():
        raise MalformedCapabilityResponse("'documentType' must be a non-empty string")

    confidence = data["confidence"]
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise MalformedCapabilityResponse("'confidence' must be a number")
    if not math.isfinite(confidence):
        raise MalformedCapabilityResponse("'confidence' must be finite")

    summary = data["summary"]
    if not isinstance(summary, str):
        raise MalformedCapabilityResponse("'summary' must be a string")

    key_data = data["keyData"]
    if not isinstance(key_data, dict):
        raise MalformedCapabilityResponse("'keyData' must be an object")

    return DocumentClassification(
        document_type=document_type.strip(),
        confidence=clamp_confidence(confidence),
        summary=summary.strip(),
        key_data=key_data,
    )


def build_medical_info(data: dict[str, Any]) -> MedicalInfo:
    """Validate a medical-entity payload. Absent fields stay empty.

    Raises:
        MalformedCapabilityResponse: when a present field has the wrong type.
    """
    return MedicalInfo(
        patient_name=_optional_string(data, "patientName"),
        patient_id=_optional_string(data, "patientId"),
        date_of_birth=_optional_string(data, "dateOfBirth"),
        diagnoses=_string_list(data, "diagnosis"),
        medications=_string_list(data, "medications"),
        procedures=_string_list(data, "procedures"),
        allergies=_string_list(data, "allergies"),
        vital_signs=_vital_signs(data.get("vitalSigns")),
    )


def _optional_string(data: dict[str, Any], field: str) -> str | None:
    value = data.get(field)
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise MalformedCapabilityResponse(f"'{field}' must be a string or null")
    return value.strip() or None


def _string_list(data: dict[str, Any], field: str) -> list[str]:
    value = data.get(field)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedCapabilityResponse(f"'{field}' must be a list")
    if len(value) > _MAX_LIST_ITEMS:
        raise MalformedCapabilityResponse(
            f"Too many '{field}' items: {len(value)} (max {_MAX_LIST_ITEMS})"
        )
    items: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise MalformedCapabilityResponse(f"'{field}[{index}]' must be a string")
        if item.strip():
            items.append(item.strip())
    return items


def _vital_signs(raw: Any) -> VitalSigns | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise MalformedCapabilityResponse("'vitalSigns' must be an object or null")
    values = {attr: _optional_string(raw, key) for key, attr in _VITAL_FIELDS.items()}
    if not any(values.values()):
        return None
    return VitalSigns(**values)
