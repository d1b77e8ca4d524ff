from concurrent.futures import ThreadPoolExecutor

from uxaudit.analysis.exceptions import JobNotFoundError, PersistenceError
from uxaudit.analysis.metadata import ImageMetadataExtractor
from uxaudit.database.repositories.findings_repository import FindingsRepository
from uxaudit.database.repositories.job_repository import JobRepository
from uxaudit.detection.base import BaseDetector
from uxaudit.logging.logger import Log
from uxaudit.processor.merge import build_summary, merge_findings
from uxaudit.processor.pipeline import PipelineContext, PipelineStep


class LoadJobStep(PipelineStep):
    def __init__(self, job_repo: JobRepository) -> None:
        self._job_repo = job_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        job = self._job_repo.find_by_id(context.job_id)
        if job is None:
            raise JobNotFoundError(f"Analysis job {context.job_id} not found")
        context.job = job
        return context


class ExtractMetadataStep(PipelineStep):
    def __init__(self, extractor: ImageMetadataExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.job is None:
            raise ValueError("PipelineContext.job must be set before metadata extraction")
        context.metadata = self._extractor.extract(context.job.file_reference)
        return context


class DetectStep(PipelineStep):
    """Runs all detectors concurrently and waits for every one of them."""

    def __init__(self, detectors: list[BaseDetector]) -> None:
        self._detectors = detectors

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.job is None or context.metadata is None:
            raise ValueError("PipelineContext.metadata must be set before detection")
        reference = context.job.file_reference
        metadata = context.metadata
        with ThreadPoolExecutor(
            max_workers=max(1, len(self._detectors)),
            thread_name_prefix="detector",
        ) as executor:
            futures = [
                (detector.name, executor.submit(detector.detect, reference, metadata))
                for detector in self._detectors
            ]
            for name, future in futures:
                findings = future.result()
                context.detector_findings[name] = findings
                Log.info(
                    f"Detector '{name}' found {len(findings)} issues for job {context.job_id}"
                )
        return context


class MergeStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        if context.metadata is None:
            raise ValueError("PipelineContext.metadata must be set before merge")
        context.findings = merge_findings(*context.detector_findings.values())
        context.summary = build_summary(
            context.findings, context.metadata, context.elapsed_seconds()
        )
        Log.info(
            f"Job {context.job_id}: {context.summary.total_issues} findings in "
            f"{context.summary.analysis_duration_ms}ms"
        )
        return context


class PersistFindingsStep(PipelineStep):
    def __init__(self, findings_repo: FindingsRepository) -> None:
        self._findings_repo = findings_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        try:
            self._findings_repo.save_findings(context.job_id, context.findings)
        except PersistenceError as exc:
            Log.error(f"Job {context.job_id}: findings not saved: {exc}")
            context.persistence_errors.append(str(exc))
        return context


class PersistSummaryStep(PipelineStep):
    def __init__(self, findings_repo: FindingsRepository) -> None:
        self._findings_repo = findings_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.summary is None:
            raise ValueError("PipelineContext.summary must be set before persist")
        try:
            self._findings_repo.upsert_summary(context.job_id, context.summary)
        except PersistenceError as exc:
            Log.error(f"Job {context.job_id}: summary not saved: {exc}")
            context.persistence_errors.append(str(exc))
        return context


class MarkCompletedStep(PipelineStep):
    def __init__(self, job_repo: JobRepository) -> None:
        self._job_repo = job_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if not self._job_repo.mark_completed(context.job_id):
            Log.warning(f"Job {context.job_id} was no longer processing when completing")
        Log.info(f"Job {context.job_id} marked as completed")
        return context


class MarkFailedStep(PipelineStep):
    def __init__(self, job_repo: JobRepository) -> None:
        self._job_repo = job_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        self._job_repo.mark_failed(context.job_id, context.error_message)
        Log.error(f"Job {context.job_id} marked as failed: {context.error_message}")
        return context
