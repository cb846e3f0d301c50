from dataclasses import dataclass

from intake.audit.events import AuditEvent
from intake.audit.logger import AuditLogger
from intake.extraction.base import BaseExtractionStrategy
from intake.extraction.exceptions import ExtractionError
from intake.ingest.staging import StagingArea
from intake.logging.logger import Log
from intake.processor.models import DocumentSubmission


@dataclass(frozen=True)
class ExtractionOutcome:
    text: str
    strategy: str
    degraded: bool = False
    reason: str | None = None


def placeholder_text(filename: str, reason: str) -> str:
    return f"[Text extraction unavailable: {filename} ({reason})]"


class TextExtractor:
    """Dispatches each submission to the strategy registered for its MIME type.

    A failing strategy never aborts the run; it yields placeholder text
    tagged as a degraded extraction.
    """

    def __init__(
        self,
        strategies: dict[str, BaseExtractionStrategy],
        staging: StagingArea,
        audit: AuditLogger,
    ) -> None:
        self._strategies = strategies
        self._staging = staging
        self._audit = audit

    def strategy_for(self, mime_type: str) -> BaseExtractionStrategy | None:
        return self._strategies.get(mime_type)

    def extract(self, submission: DocumentSubmission) -> ExtractionOutcome:
        strategy = self.strategy_for(submission.mime_type)
        strategy_name = strategy.name if strategy is not None else "none"
        self._audit.record(
            submission.id, AuditEvent.EXTRACTION_STARTED, strategy=strategy_name
        )

        if strategy is None:
            outcome = self._degraded(
                submission, strategy_name, f"no strategy for {submission.mime_type}"
            )
        else:
            data = self._staging.load(submission)
            try:
                text = strategy.extract(data, submission.mime_type)
            except ExtractionError as exc:
                outcome = self._degraded(submission, strategy_name, str(exc))
            except Exception as exc:
                Log.exception(f"Unexpected {strategy_name} extraction error")
                outcome = self._degraded(
                    submission, strategy_name, f"unexpected {type(exc).__name__}: {exc}"
                )
            else:
                # PostgreSQL text columns reject NUL
                outcome = ExtractionOutcome(
                    text=text.replace("\x00", ""), strategy=strategy_name
                )

        if outcome.degraded:
            self._audit.record(
                submission.id,
                AuditEvent.EXTRACTION_DEGRADED,
                strategy=strategy_name,
                reason=outcome.reason,
            )
        else:
            self._audit.record(
                submission.id,
                AuditEvent.EXTRACTION_COMPLETED,
                strategy=strategy_name,
                characters=len(outcome.text),
            )
            Log.info(
                f"Extracted {len(outcome.text)} chars from submission {submission.id}",
                strategy=strategy_name,
            )
        return outcome

    @staticmethod
    def _degraded(
        submission: DocumentSubmission, strategy_name: str, reason: str
    ) -> ExtractionOutcome:
        Log.warning(f"Degraded extraction for submission {submission.id}: {reason}")
        return ExtractionOutcome(
            text=placeholder_text(submission.original_filename, reason),
            strategy=strategy_name,
            degraded=True,
            reason=reason,
        )
