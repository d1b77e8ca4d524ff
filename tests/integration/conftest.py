import os
from collections.abc import Callable, Generator
from importlib import resources
from typing import Any

import psycopg
import pytest

from uxaudit.analysis.models import JobStatus
from uxaudit.config.settings import Settings
from uxaudit.database.connection import close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "uxaudit_test")
    return Settings()


def _apply_schema() -> None:
    schema = resources.files("uxaudit.database").joinpath("schema.sql").read_text()
    with get_connection() as conn:
        conn.execute(schema)
        conn.commit()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        _apply_schema()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup() -> Generator[list[str], None, None]:
    cleanup: list[str] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for job_id in cleanup:
                # results and metadata cascade
                cur.execute("DELETE FROM analyses WHERE id = %s", (job_id,))
        conn.commit()


@pytest.fixture
def seed_analysis(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[str],
) -> Callable[..., str]:
    """Factory inserting an analyses row and returning its ID."""

    def _seed(file_url: str = "7/home.png", status: JobStatus = JobStatus.PENDING) -> str:
        with db_conn.cursor() as cur:
            cur.execute(
                "INSERT INTO analyses (file_url, status) VALUES (%s, %s) RETURNING id",
                (file_url, status.value),
            )
            row = cur.fetchone()
            assert row is not None
        db_conn.commit()
        job_id = str(row[0])
        integration_cleanup.append(job_id)
        return job_id

    return _seed


@pytest.fixture
def read_status(db_conn: psycopg.Connection[Any]) -> Callable[[str], tuple[str, str | None]]:
    """Return (status, error_message) of an analyses row as currently committed."""

    def _read(job_id: str) -> tuple[str, str | None]:
        with db_conn.cursor() as cur:
            cur.execute("SELECT status, error_message FROM analyses WHERE id = %s", (job_id,))
            row = cur.fetchone()
        db_conn.commit()
        assert row is not None
        return row[0], row[1]

    return _read
