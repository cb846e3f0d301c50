class ExtractionError(Exception):
    """Raised when a strategy cannot produce text from a document."""
