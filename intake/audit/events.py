from enum import Enum


class AuditEvent(str, Enum):
    """Event types recorded in the audit trail."""

    SUBMITTED = "submitted"
    REJECTED_INGRESS = "rejected-ingress"
    SCAN_STARTED = "scan-started"
    SCAN_PASSED = "scan-passed"
    REJECTED_SCAN = "rejected-scan"
    EXTRACTION_STARTED = "extraction-started"
    EXTRACTION_COMPLETED = "extraction-completed"
    EXTRACTION_DEGRADED = "extraction-degraded"
    ANALYSIS_STARTED = "analysis-started"
    ANALYSIS_COMPLETED = "analysis-completed"
    ANALYSIS_DEGRADED = "analysis-degraded"
    COMPLIANCE_CHECKED = "compliance-checked"
    COMPLETED = "completed"
    PROCESSING_FAILED = "processing-failed"
    STAGING_RELEASED = "staging-released"
    EXPORTED = "exported"
    TRANSMISSION_SUCCEEDED = "transmission-succeeded"
    TRANSMISSION_FAILED = "transmission-failed"


SYSTEM_ACTOR = "system:intake-pipeline"
