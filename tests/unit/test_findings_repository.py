from unittest.mock import MagicMock, patch

import psycopg
import pytest

from uxaudit.analysis.exceptions import PersistenceError
from uxaudit.analysis.models import Finding, IssueType, RunSummary, Severity
from uxaudit.database.repositories.findings_repository import FindingsRepository

_MODULE = "uxaudit.database.repositories.findings_repository.get_connection"


def _make_finding(rule_id: str = "rules:contrast-1") -> Finding:
    return Finding(
        issue_type=IssueType.CONTRAST,
        severity=Severity.ERROR,
        title="Low contrast text (2.8:1)",
        description="Text contrast is below the 4.5:1 minimum.",
        x=100,
        y=200,
        width=300,
        height=40,
        rule_id=rule_id,
    )


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection, transaction and cursor; return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_conn.transaction.return_value.__enter__ = MagicMock(return_value=None)
    mock_conn.transaction.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestSaveFindings:
    @patch(_MODULE)
    def test_replaces_rows_in_one_transaction(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)

        FindingsRepository().save_findings(
            "job-1", [_make_finding(), _make_finding("rules:contrast-2")]
        )

        mock_conn.transaction.assert_called_once()
        delete_sql = mock_cursor.execute.call_args.args[0]
        assert "DELETE FROM analysis_results" in delete_sql
        rows = mock_cursor.executemany.call_args.args[1]
        assert [row[1] for row in rows] == [0, 1]
        assert rows[0][2:4] == ("contrast", "error")
        assert rows[1][-1] == "rules:contrast-2"

    @patch(_MODULE)
    def test_empty_list_only_clears(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)

        FindingsRepository().save_findings("job-1", [])

        mock_cursor.execute.assert_called_once()
        mock_cursor.executemany.assert_not_called()

    @patch(_MODULE)
    def test_database_error_becomes_persistence_error(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.executemany.side_effect = psycopg.OperationalError("connection lost")

        with pytest.raises(PersistenceError, match="Failed to save 1 findings for job job-1"):
            FindingsRepository().save_findings("job-1", [_make_finding()])


class TestUpsertSummary:
    @patch(_MODULE)
    def test_upserts_on_analysis_id(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)

        FindingsRepository().upsert_summary("job-1", RunSummary(1920, 1080, 8, 42))

        sql, params = mock_conn.execute.call_args.args
        assert "ON CONFLICT (analysis_id) DO UPDATE" in sql
        assert params == ("job-1", 1920, 1080, 8, 42)
        mock_conn.commit.assert_called_once()

    @patch(_MODULE)
    def test_database_error_becomes_persistence_error(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.side_effect = psycopg.OperationalError("timeout")

        with pytest.raises(PersistenceError, match="summary for job job-1"):
            FindingsRepository().upsert_summary("job-1", RunSummary(10, 10, 0, 0))


class TestReadBack:
    @patch(_MODULE)
    def test_get_findings_maps_rows(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [
            {
                "issue_type": "layout",
                "severity": "info",
                "title": "t",
                "description": "d",
                "x": 1,
                "y": 2,
                "width": 3,
                "height": 4,
                "rule_id": None,
            }
        ]

        findings = FindingsRepository().get_findings("job-1")

        assert findings[0].issue_type is IssueType.LAYOUT
        assert findings[0].severity is Severity.INFO
        assert findings[0].rule_id is None

    @patch(_MODULE)
    def test_get_summary_returns_none_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert FindingsRepository().get_summary("job-1") is None
