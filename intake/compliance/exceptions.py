class ScrubError(Exception):
    """Raised when identifiers cannot be redacted from outgoing text."""
