from collections.abc import Sequence

import psycopg
from psycopg.rows import dict_row

from uxaudit.analysis.exceptions import PersistenceError
from uxaudit.analysis.models import Finding, IssueType, RunSummary, Severity
from uxaudit.database.connection import get_connection


class FindingsRepository:
    """Database operations for the analysis_results and analysis_metadata tables."""

    def save_findings(self, job_id: str, findings: Sequence[Finding]) -> None:
        """Replace all findings stored for a job in a single transaction.

        Raises:
            PersistenceError: if the write fails.
        """
        rows = [
            (
                job_id,
                position,
                finding.issue_type.value,
                finding.severity.value,
                finding.title,
                finding.description,
                finding.x,
                finding.y,
                finding.width,
                finding.height,
                finding.rule_id,
            )
            for position, finding in enumerate(findings)
        ]
        try:
            with get_connection() as conn:
                with conn.transaction():
                    with conn.cursor() as cur:
                        cur.execute(
                            "DELETE FROM analysis_results WHERE analysis_id = %s",
                            (job_id,),
                        )
                        if rows:
                            cur.executemany(
                                """
                                INSERT INTO analysis_results
                                (analysis_id, position, issue_type, severity, title,
                                 description, x, y, width, height, rule_id)
                                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                                """,
                                rows,
                            )
        except psycopg.Error as exc:
            raise PersistenceError(
                f"Failed to save {len(rows)} findings for job {job_id}: {exc}"
            ) from exc

    def upsert_summary(self, job_id: str, summary: RunSummary) -> None:
        """Insert or replace the run summary for a job.

        Raises:
            PersistenceError: if the write fails.
        """
        try:
            with get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO analysis_metadata
                    (analysis_id, image_width, image_height, total_issues,
                     analysis_duration_ms)
                    VALUES (%s, %s, %s, %s, %s)
                    ON CONFLICT (analysis_id) DO UPDATE
                    SET image_width = EXCLUDED.image_width,
                        image_height = EXCLUDED.image_height,
                        total_issues = EXCLUDED.total_issues,
                        analysis_duration_ms = EXCLUDED.analysis_duration_ms,
                        updated_at = NOW()
                    """,
                    (
                        job_id,
                        summary.image_width,
                        summary.image_height,
                        summary.total_issues,
                        summary.analysis_duration_ms,
                    ),
                )
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(
                f"Failed to upsert summary for job {job_id}: {exc}"
            ) from exc

    def get_findings(self, job_id: str) -> list[Finding]:
        """Return stored findings for a job in their original order."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT issue_type, severity, title, description,
                           x, y, width, height, rule_id
                    FROM analysis_results
                    WHERE analysis_id = %s
                    ORDER BY position
                    """,
                    (job_id,),
                )
                rows = cur.fetchall()

        return [
            Finding(
                issue_type=IssueType(row["issue_type"]),
                severity=Severity(row["severity"]),
                title=row["title"],
                description=row["description"],
                x=row["x"],
                y=row["y"],
                width=row["width"],
                height=row["height"],
                rule_id=row["rule_id"],
            )
            for row in rows
        ]

    def get_summary(self, job_id: str) -> RunSummary | None:
        """Return the stored run summary for a job, if any."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT image_width, image_height, total_issues, analysis_duration_ms
                    FROM analysis_metadata
                    WHERE analysis_id = %s
                    """,
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return RunSummary(
            image_width=row["image_width"],
            image_height=row["image_height"],
            total_issues=row["total_issues"],
            analysis_duration_ms=row["analysis_duration_ms"],
        )
