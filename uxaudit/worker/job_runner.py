from uxaudit.analysis.exceptions import JobNotFoundError
from uxaudit.analysis.models import AnalysisOutcome, JobStatus
from uxaudit.database.repositories.job_repository import JobRepository
from uxaudit.logging.logger import Log
from uxaudit.processor.processor import Processor
from uxaudit.worker.scheduler import ClaimScheduler


class JobRunner:
    """Entry point for one analysis run: claim, process, report."""

    def __init__(
        self,
        processor: Processor,
        job_repo: JobRepository,
        scheduler: ClaimScheduler | None = None,
    ) -> None:
        self._processor = processor
        self._job_repo = job_repo
        self._scheduler = scheduler if scheduler is not None else ClaimScheduler(job_repo)

    def run_analysis(self, job_id: str) -> AnalysisOutcome:
        """Analyze a job unless another caller already holds or finished it.

        A failed job can be retried by calling this again.

        Raises:
            JobNotFoundError: if no job with this ID exists.
        """
        claim = self._scheduler.claim(job_id)
        if not claim.claimed:
            return self._already_handled(job_id)

        try:
            context = self._processor.process(job_id)
        except Exception as exc:
            Log.error(f"Job {job_id} failed: {exc}")
            return AnalysisOutcome(
                job_id=job_id,
                status=self._status_after_failure(job_id),
                error=str(exc) or type(exc).__name__,
            )

        Log.info(f"Job {job_id} completed with {len(context.findings)} findings")
        return AnalysisOutcome(
            job_id=job_id,
            status=JobStatus.COMPLETED,
            total_issues=len(context.findings),
        )

    def _status_after_failure(self, job_id: str) -> JobStatus:
        """Report the stored status, which stays processing if marking it failed did not work."""
        try:
            job = self._job_repo.find_by_id(job_id)
        except Exception as exc:
            Log.warning(f"Could not re-read job {job_id} after failure: {exc}")
            return JobStatus.FAILED
        return job.status if job is not None else JobStatus.FAILED

    def _already_handled(self, job_id: str) -> AnalysisOutcome:
        job = self._job_repo.find_by_id(job_id)
        if job is None:
            raise JobNotFoundError(f"Analysis job {job_id} not found")
        return AnalysisOutcome(job_id=job_id, status=job.status, claimed=False)
