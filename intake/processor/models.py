from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path


def utcnow() -> datetime:
    return datetime.now(UTC)


class PipelineState(str, Enum):
    """States of a single document's pipeline run."""

    SUBMITTED = "submitted"
    SCANNING = "scanning"
    REJECTED = "rejected"
    EXTRACTING = "extracting"
    ANALYZING = "analyzing"
    COMPLIANCE_CHECKING = "compliance_checking"
    COMPLETED = "completed"


TERMINAL_STATES = frozenset({PipelineState.REJECTED, PipelineState.COMPLETED})


class ComplianceFlag(str, Enum):
    """Advisory PHI/PII exposure flags. Never block completion."""

    PATIENT_NAME_EXPOSED = "patient-name-exposed"
    PATIENT_ID_EXPOSED = "patient-id-exposed"
    DOB_EXPOSED = "dob-exposed"
    SSN_PATTERN_DETECTED = "ssn-pattern-detected"
    PAYMENT_CARD_PATTERN_DETECTED = "payment-card-pattern-detected"


@dataclass(frozen=True)
class DocumentSubmission:
    """An accepted upload. Immutable once the security scan begins."""

    id: str
    original_filename: str
    mime_type: str
    size_bytes: int
    staging_path: Path
    submitted_by: str
    submitted_at: datetime = field(default_factory=utcnow)
    export_pending: bool = False


@dataclass(frozen=True)
class SecurityScanOutcome:
    passed: bool
    threats: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class VitalSigns:
    blood_pressure: str | None = None
    heart_rate: str | None = None
    temperature: str | None = None
    respiratory_rate: str | None = None
    oxygen_saturation: str | None = None
    weight: str | None = None


@dataclass(frozen=True)
class MedicalInfo:
    """Structured medical entities. Every field is optional; extraction may be partial."""

    patient_name: str | None = None
    patient_id: str | None = None
    date_of_birth: str | None = None
    diagnoses: list[str] = field(default_factory=list)
    medications: list[str] = field(default_factory=list)
    procedures: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)
    vital_signs: VitalSigns | None = None


@dataclass(frozen=True)
class DocumentClassification:
    """Output of the classification capability call."""

    document_type: str
    confidence: float
    summary: str
    key_data: dict[str, object] = field(default_factory=dict)


def clamp_confidence(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass
class ProcessingResult:
    """The pipeline's output record, built field-by-field as stages complete."""

    id: str
    submission_id: str
    status: str = PipelineState.SUBMITTED.value
    extracted_text: str = ""
    document_type: str = "Unknown"
    confidence: float = 0.0
    summary: str = ""
    key_data: dict[str, object] = field(default_factory=dict)
    medical_info: MedicalInfo | None = None
    compliance_flags: list[ComplianceFlag] = field(default_factory=list)
    security_scan: SecurityScanOutcome | None = None
    extraction_degraded: bool = False
    analysis_degraded: bool = False
    created_at: datetime = field(default_factory=utcnow)

    def __setattr__(self, name: str, value: object) -> None:
        if name == "confidence":
            value = clamp_confidence(value)  # type: ignore[arg-type]
        object.__setattr__(self, name, value)

    @property
    def hipaa_compliant(self) -> bool:
        return len(self.compliance_flags) == 0


class TransmissionChannel(str, Enum):
    DOWNLOAD = "download"
    EMAIL = "email"
    FAX = "fax"


@dataclass(frozen=True)
class TransmissionRecord:
    """One export or transmission attempt. Append-only."""

    id: str
    submission_id: str
    result_id: str | None
    channel: TransmissionChannel
    recipient: str
    success: bool
    metadata: dict[str, object] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class AuditEntry:
    """One stage transition or transmission event. Append-only."""

    submission_id: str
    event_type: str
    actor: str
    payload: dict[str, object] = field(default_factory=dict)
    result_id: str | None = None
    timestamp: datetime = field(default_factory=utcnow)
