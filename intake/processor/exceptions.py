class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class SubmissionNotFoundError(ProcessorError):
    """Raised when a submission or its result cannot be found in the database."""


class InvalidStateTransition(ProcessorError):
    """Raised when a pipeline run tries to re-enter or skip a state."""


class StagedFileMissingError(ProcessorError):
    """Raised when the staging file of a submission no longer exists."""
