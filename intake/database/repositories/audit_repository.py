from psycopg.types.json import Jsonb

from intake.database.connection import get_connection
from intake.processor.models import AuditEntry


class AuditRepository:
    """Append-only storage for the audit_entries table.

    Rows are only ever inserted, so concurrent writers need no locking.
    """

    def append(self, entry: AuditEntry) -> int:
        """Insert and commit an entry. Returns its sequence number."""
        with get_connection() as conn:
            cur = conn.execute(
                """
                INSERT INTO audit_entries
                (created_at, submission_id, result_id, event_type, actor, payload)
                VALUES (%s, %s, %s, %s, %s, %s)
                RETURNING sequence
                """,
                (
                    entry.timestamp,
                    entry.submission_id,
                    entry.result_id,
                    entry.event_type,
                    entry.actor,
                    Jsonb(entry.payload),
                ),
            )
            row = cur.fetchone()
            conn.commit()
        if row is None:
            raise RuntimeError("INSERT ... RETURNING produced no row")
        return int(row[0])

    def event_types_for(self, submission_id: str) -> list[str]:
        """Event types recorded for a submission, in sequence order."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT event_type FROM audit_entries
                    WHERE submission_id = %s
                    ORDER BY sequence
                    """,
                    (submission_id,),
                )
                return [row[0] for row in cur.fetchall()]
