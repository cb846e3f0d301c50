from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from intake.processor.models import DocumentSubmission, PipelineState, ProcessingResult

if TYPE_CHECKING:
    from intake.analysis.analyzer import AnalysisOutcome
    from intake.extraction.extractor import ExtractionOutcome


@dataclass(slots=True)
class PipelineContext:
    submission: DocumentSubmission
    result: ProcessingResult
    state: PipelineState = PipelineState.SUBMITTED
    extraction: "ExtractionOutcome | None" = None
    analysis: "AnalysisOutcome | None" = None
    rejected: bool = False


class PipelineStep(ABC):
    """One stage of a pipeline run. ``state`` is the state entered before it runs."""

    state: ClassVar[PipelineState]

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
