from dataclasses import dataclass

from uxaudit.database.repositories.job_repository import JobRepository
from uxaudit.logging.logger import Log


@dataclass(frozen=True)
class ClaimResult:
    job_id: str
    claimed: bool


class ClaimScheduler:
    """Grants exclusive execution of a job to exactly one caller.

    Holds no state of its own; the job store's conditional update is the
    only concurrency control.
    """

    def __init__(self, job_repo: JobRepository) -> None:
        self._job_repo = job_repo

    def claim(self, job_id: str) -> ClaimResult:
        claimed = self._job_repo.claim(job_id)
        if claimed:
            Log.info(f"Claimed job {job_id}")
        else:
            Log.info(f"Job {job_id} not claimable, already processing or completed")
        return ClaimResult(job_id=job_id, claimed=claimed)
