from intake.analysis.analyzer import AnalysisOutcome, ClinicalAnalyzer
from intake.analysis.capability import BaseClassificationCapability
from intake.analysis.factory import ClassificationCapabilityFactory
from intake.analysis.reasoning_capability import ReasoningCapability

__all__ = [
    "AnalysisOutcome",
    "BaseClassificationCapability",
    "ClassificationCapabilityFactory",
    "ClinicalAnalyzer",
    "ReasoningCapability",
]
