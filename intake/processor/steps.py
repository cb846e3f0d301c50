from intake.analysis.analyzer import ClinicalAnalyzer
from intake.audit.events import AuditEvent
from intake.audit.logger import AuditLogger
from intake.compliance.checker import ComplianceChecker
from intake.extraction.extractor import TextExtractor
from intake.logging.logger import Log
from intake.processor.models import PipelineState
from intake.processor.pipeline import PipelineContext, PipelineStep
from intake.security.scanner import SecurityScanner


class ScanStep(PipelineStep):
    state = PipelineState.SCANNING

    def __init__(self, scanner: SecurityScanner) -> None:
        self._scanner = scanner

    def run(self, context: PipelineContext) -> PipelineContext:
        outcome = self._scanner.scan(context.submission)
        context.result.security_scan = outcome
        context.rejected = not outcome.passed
        return context


class ExtractStep(PipelineStep):
    state = PipelineState.EXTRACTING

    def __init__(self, extractor: TextExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        outcome = self._extractor.extract(context.submission)
        context.extraction = outcome
        context.result.extracted_text = outcome.text
        context.result.extraction_degraded = outcome.degraded
        return context


class AnalyzeStep(PipelineStep):
    state = PipelineState.ANALYZING

    def __init__(self, analyzer: ClinicalAnalyzer) -> None:
        self._analyzer = analyzer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extraction is None:
            raise ValueError("PipelineContext.extraction must be set before analysis")
        outcome = self._analyzer.analyze(
            context.extraction.text,
            context.submission.original_filename,
            submission_id=context.submission.id,
            extraction_degraded=context.extraction.degraded,
        )
        context.analysis = outcome
        result = context.result
        result.document_type = outcome.document_type
        result.confidence = outcome.confidence
        result.summary = outcome.summary
        result.key_data = outcome.key_data
        result.medical_info = outcome.medical_info
        result.analysis_degraded = outcome.degraded
        return context


class ComplianceCheckStep(PipelineStep):
    state = PipelineState.COMPLIANCE_CHECKING

    def __init__(self, checker: ComplianceChecker, audit: AuditLogger) -> None:
        self._checker = checker
        self._audit = audit

    def run(self, context: PipelineContext) -> PipelineContext:
        flags = self._checker.check(context.result.extracted_text, context.result.medical_info)
        context.result.compliance_flags = flags
        self._audit.record(
            context.submission.id,
            AuditEvent.COMPLIANCE_CHECKED,
            result_id=context.result.id,
            flags=[flag.value for flag in flags],
            hipaa_compliant=context.result.hipaa_compliant,
        )
        if flags:
            Log.warning(
                f"Compliance flags raised for submission {context.submission.id}",
                flags=",".join(flag.value for flag in flags),
            )
        return context
