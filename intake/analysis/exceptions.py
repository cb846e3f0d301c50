class PromptLoadError(Exception):
    """Raised when bundled prompt templates or schemas cannot be loaded."""
