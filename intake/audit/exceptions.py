class AuditWriteError(Exception):
    """Raised when an audit entry could not be committed to the audit store."""
