"""Plain-text renditions of a processing result."""

import json
from dataclasses import asdict
from datetime import datetime

from intake.processor.models import ProcessingResult


def render_summary_report(result: ProcessingResult, generated_at: datetime) -> str:
    flags = [flag.value for flag in result.compliance_flags]
    scan = result.security_scan
    lines = [
        "DOCUMENT PROCESSING SUMMARY REPORT",
        f"Generated: {generated_at.isoformat()}",
        "",
        "DOCUMENT ANALYSIS:",
        f"- Type: {result.document_type}",
        f"- Confidence: {_percent(result.confidence)}",
        f"- HIPAA Compliant: {'Yes' if result.hipaa_compliant else 'No'}",
        "",
        "SUMMARY:",
        result.summary or "No summary available",
        "",
        "MEDICAL INFORMATION:",
        _medical_info_block(result, "No medical information extracted"),
        "",
        "KEY DATA:",
        json.dumps(result.key_data, indent=2, default=str),
        "",
        "COMPLIANCE FLAGS:",
        "\n".join(f"- {flag}" for flag in flags) if flags else "No compliance issues detected",
        "",
        "SECURITY SCAN:",
        f"- Status: {'Passed' if scan is not None and scan.passed else 'Failed'}",
        f"- Threats: {', '.join(scan.threats) if scan and scan.threats else 'None detected'}",
    ]
    if result.extraction_degraded or result.analysis_degraded:
        lines += [
            "",
            "PROCESSING NOTES:",
            f"- Extraction degraded: {'Yes' if result.extraction_degraded else 'No'}",
            f"- Analysis degraded: {'Yes' if result.analysis_degraded else 'No'}",
        ]
    return "\n".join(lines) + "\n"


def render_annotated_document(result: ProcessingResult, generated_at: datetime) -> str:
    flags = [flag.value for flag in result.compliance_flags]
    compliance_note = (
        "ATTENTION: " + "; ".join(flags) if flags else "Document meets HIPAA compliance standards"
    )
    lines = [
        "ANNOTATED DOCUMENT",
        f"Generated: {generated_at.isoformat()}",
        "",
        f"[AI ANALYSIS - Document Type: {result.document_type} "
        f"({_percent(result.confidence)} confidence)]",
        "",
        "ORIGINAL CONTENT:",
        result.extracted_text,
        "",
        "AI ANNOTATIONS:",
        result.summary or "No annotations available",
        "",
        "EXTRACTED MEDICAL DATA:",
        _medical_info_block(result, "No medical data extracted"),
        "",
        "COMPLIANCE NOTES:",
        compliance_note,
    ]
    return "\n".join(lines) + "\n"


def _percent(confidence: float) -> str:
    return f"{round(confidence * 100)}%"


def _medical_info_block(result: ProcessingResult, empty_text: str) -> str:
    if result.medical_info is None:
        return empty_text
    return json.dumps(asdict(result.medical_info), indent=2)
