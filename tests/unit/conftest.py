import threading
from datetime import UTC, datetime

import pytest

from uxaudit.analysis.models import CLAIMABLE_STATUSES, JobStatus
from uxaudit.database.models import JobRecord


class InMemoryJobRepository:
    """Job store double whose conditional updates are atomic, like a single UPDATE."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.jobs: dict[str, JobRecord] = {}

    def add(self, job_id: str, status: JobStatus = JobStatus.PENDING, reference: str = "") -> None:
        now = datetime.now(UTC)
        self.jobs[job_id] = JobRecord(
            id=job_id,
            status=status,
            file_reference=reference or f"{job_id}.png",
            created_at=now,
            updated_at=now,
        )

    def claim(self, job_id: str) -> bool:
        with self._lock:
            job = self.jobs.get(job_id)
            if job is None or job.status not in CLAIMABLE_STATUSES:
                return False
            job.status = JobStatus.PROCESSING
            job.error_message = None
            job.updated_at = datetime.now(UTC)
            return True

    def mark_completed(self, job_id: str) -> bool:
        return self._finish(job_id, JobStatus.COMPLETED, None)

    def mark_failed(self, job_id: str, error: str) -> bool:
        return self._finish(job_id, JobStatus.FAILED, error)

    def find_by_id(self, job_id: str) -> JobRecord | None:
        return self.jobs.get(job_id)

    def find_next_pending(self) -> str | None:
        pending = [j for j in self.jobs.values() if j.status is JobStatus.PENDING]
        return pending[0].id if pending else None

    def _finish(self, job_id: str, status: JobStatus, error: str | None) -> bool:
        with self._lock:
            job = self.jobs.get(job_id)
            if job is None or job.status is not JobStatus.PROCESSING:
                return False
            job.status = status
            job.error_message = error
            job.updated_at = datetime.now(UTC)
            return True


@pytest.fixture()
def job_store() -> InMemoryJobRepository:
    return InMemoryJobRepository()
