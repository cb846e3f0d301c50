from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from intake.database.connection import get_connection
from intake.processor.models import TransmissionChannel, TransmissionRecord


class TransmissionRepository:
    """Append-only storage for the transmission_records table."""

    def append(self, record: TransmissionRecord) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO transmission_records
                (id, submission_id, result_id, channel, recipient, success,
                 metadata, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    record.id,
                    record.submission_id,
                    record.result_id,
                    record.channel.value,
                    record.recipient,
                    record.success,
                    Jsonb(record.metadata),
                    record.timestamp,
                ),
            )
            conn.commit()

    def list_for_result(self, result_id: str) -> list[TransmissionRecord]:
        """Return every transmission of a result in creation order."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, submission_id, result_id, channel, recipient,
                           success, metadata, created_at
                    FROM transmission_records
                    WHERE result_id = %s
                    ORDER BY created_at
                    """,
                    (result_id,),
                )
                rows = cur.fetchall()

        return [
            TransmissionRecord(
                id=row["id"],
                submission_id=row["submission_id"],
                result_id=row["result_id"],
                channel=TransmissionChannel(row["channel"]),
                recipient=row["recipient"],
                success=row["success"],
                metadata=row["metadata"] or {},
                timestamp=row["created_at"],
            )
            for row in rows
        ]
