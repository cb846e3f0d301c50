class CapabilityError(Exception):
    """Base exception for failures of an external capability."""


class CapabilityUnavailable(CapabilityError):
    """Raised when the capability cannot be reached (network, auth, server error)."""


class CapabilityTimeout(CapabilityError):
    """Raised when the capability did not answer within the configured timeout."""


class MalformedCapabilityResponse(CapabilityError):
    """Raised when the capability answered with output that fails strict decoding."""
