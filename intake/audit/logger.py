"""Append-only audit trail for every stage transition and transmission."""

from intake.audit.events import SYSTEM_ACTOR, AuditEvent
from intake.audit.exceptions import AuditWriteError
from intake.database.repositories.audit_repository import AuditRepository
from intake.logging.logger import Log
from intake.processor.models import AuditEntry


class AuditLogger:
    """Commits audit entries to the audit store before returning.

    Callers treat ``log`` as fire-and-forget, but it only returns once the
    entry is durable. Store failures surface as ``AuditWriteError``.
    """

    def __init__(self, store: AuditRepository) -> None:
        self._store = store

    def log(self, entry: AuditEntry) -> None:
        try:
            sequence = self._store.append(entry)
        except Exception as exc:
            Log.error(
                f"Audit write failed for {entry.event_type}",
                submission_id=entry.submission_id,
            )
            raise AuditWriteError(f"Failed to persist audit entry: {exc}") from exc
        Log.info(
            f"audit {_event_name(entry.event_type)}",
            sequence=sequence,
            submission_id=entry.submission_id,
            actor=entry.actor,
        )

    def record(
        self,
        submission_id: str,
        event: AuditEvent,
        *,
        actor: str = SYSTEM_ACTOR,
        result_id: str | None = None,
        **payload: object,
    ) -> None:
        """Build and log an entry in one call."""
        self.log(
            AuditEntry(
                submission_id=submission_id,
                event_type=event.value,
                actor=actor,
                payload=dict(payload),
                result_id=result_id,
            )
        )


def _event_name(event_type: str | AuditEvent) -> str:
    return event_type.value if isinstance(event_type, AuditEvent) else event_type
