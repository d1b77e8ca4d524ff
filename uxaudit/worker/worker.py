import time

from uxaudit.config.settings import Settings
from uxaudit.database.repositories.job_repository import JobRepository
from uxaudit.logging.logger import Log
from uxaudit.worker.job_runner import JobRunner


class Worker:
    """Poll loop: sleep -> find pending job -> run_analysis."""

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._settings = settings

    def run(self, max_jobs: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_jobs is set, stop after that many claimed runs (for testing).
        """
        Log.info("Worker started, polling for analysis jobs")
        jobs_done = 0
        try:
            while max_jobs is None or jobs_done < max_jobs:
                job_id = self._find_pending_job()
                if job_id is None:
                    Log.debug("No jobs available, sleeping")
                    time.sleep(self._settings.job_poll_interval_seconds)
                    continue
                if self._run_job(job_id):
                    jobs_done += 1
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _find_pending_job(self) -> str | None:
        """Look up the oldest pending job. Gracefully handle DB errors."""
        try:
            return self._job_repo.find_next_pending()
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None

    def _run_job(self, job_id: str) -> bool:
        """Run one job; return True if this worker claimed it."""
        try:
            outcome = self._job_runner.run_analysis(job_id)
        except Exception as exc:
            Log.warning(f"Could not run job {job_id}, will retry: {exc}")
            time.sleep(self._settings.job_poll_interval_seconds)
            return False
        if not outcome.claimed:
            Log.debug(f"Job {job_id} was taken by another worker")
        return outcome.claimed
