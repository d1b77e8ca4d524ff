import argparse

from uxaudit.config.settings import Settings
from uxaudit.database.connection import close_pool, init_pool
from uxaudit.database.repositories.job_repository import JobRepository
from uxaudit.logging.logger import Log
from uxaudit.processor.processor import build_processor
from uxaudit.worker.job_runner import JobRunner
from uxaudit.worker.worker import Worker


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="uxaudit", description="UX analysis worker")
    parser.add_argument("--job-id", help="analyze a single job and exit")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entry point: initialize pool -> build dependencies -> run one job or the worker loop."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        job_repo = JobRepository()
        processor = build_processor(settings, job_repo)
        job_runner = JobRunner(processor, job_repo)
        if args.job_id:
            outcome = job_runner.run_analysis(args.job_id)
            Log.info(
                f"Job {outcome.job_id}: status={outcome.status} "
                f"total_issues={outcome.total_issues}"
            )
            return
        worker = Worker(job_repo, job_runner, settings)
        worker.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
