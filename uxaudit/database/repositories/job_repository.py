from psycopg.errors import InvalidTextRepresentation
from psycopg.rows import dict_row

from uxaudit.analysis.models import CLAIMABLE_STATUSES, JobStatus
from uxaudit.database.connection import get_connection
from uxaudit.database.models import JobRecord


class JobRepository:
    """Database operations for the analyses table."""

    def claim(self, job_id: str) -> bool:
        """Atomically move a pending or failed job to processing.

        Precondition and mutation run as one conditional UPDATE, so of any
        number of concurrent callers at most one sees a returned row. An ID
        that is not a UUID matches no job.
        """
        claimable = sorted(status.value for status in CLAIMABLE_STATUSES)
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        UPDATE analyses
                        SET status = 'processing', error_message = NULL, updated_at = NOW()
                        WHERE id = %s
                          AND status = ANY(%s)
                        RETURNING id
                        """,
                        (job_id, claimable),
                    )
                    row = cur.fetchone()
                conn.commit()
        except InvalidTextRepresentation:
            return False
        return row is not None

    def mark_completed(self, job_id: str) -> bool:
        """Mark a processing job as completed. Returns False if it was not processing."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE analyses
                    SET status = 'completed', updated_at = NOW()
                    WHERE id = %s AND status = 'processing'
                    """,
                    (job_id,),
                )
                updated = cur.rowcount > 0
            conn.commit()
        return updated

    def mark_failed(self, job_id: str, error: str) -> bool:
        """Mark a processing job as failed. Returns False if it was not processing."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE analyses
                    SET status = 'failed', error_message = %s, updated_at = NOW()
                    WHERE id = %s AND status = 'processing'
                    """,
                    (error, job_id),
                )
                updated = cur.rowcount > 0
            conn.commit()
        return updated

    def find_by_id(self, job_id: str) -> JobRecord | None:
        """Find a job by ID. Returns None for unknown or malformed IDs."""
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        SELECT id, status, file_url, error_message, created_at, updated_at
                        FROM analyses
                        WHERE id = %s
                        """,
                        (job_id,),
                    )
                    row = cur.fetchone()
        except InvalidTextRepresentation:
            return None

        if row is None:
            return None

        return JobRecord(
            id=str(row["id"]),
            status=JobStatus(row["status"]),
            file_reference=row["file_url"],
            error_message=row["error_message"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def find_next_pending(self) -> str | None:
        """Return the ID of the oldest pending job without claiming it."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id
                    FROM analyses
                    WHERE status = 'pending'
                    ORDER BY created_at
                    LIMIT 1
                    """
                )
                row = cur.fetchone()
        return str(row[0]) if row is not None else None
