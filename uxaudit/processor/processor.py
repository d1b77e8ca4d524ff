from pathlib import Path

from uxaudit.analysis.metadata import ImageMetadataExtractor
from uxaudit.config.settings import Settings
from uxaudit.database.repositories.findings_repository import FindingsRepository
from uxaudit.database.repositories.job_repository import JobRepository
from uxaudit.detection.base import BaseDetector
from uxaudit.detection.rules import RuleDetector
from uxaudit.logging.logger import Log
from uxaudit.processor.pipeline import PipelineContext, PipelineStep
from uxaudit.processor.steps import (
    DetectStep,
    ExtractMetadataStep,
    LoadJobStep,
    MarkCompletedStep,
    MarkFailedStep,
    MergeStep,
    PersistFindingsStep,
    PersistSummaryStep,
)
from uxaudit.storage.image_fetcher import ImageFetcher
from uxaudit.vision.factory import VisionDetectorFactory


class Processor:
    """Runs the analysis steps for one claimed job.

    Pipeline: load job -> metadata -> detectors -> merge -> persist -> completed.
    Any exception escaping a step runs failed_step and is re-raised. If
    failed_step itself fails, that error is logged and the step's original
    exception is still the one raised.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, job_id: str) -> PipelineContext:
        """Run the full processing pipeline for a job that is already claimed."""
        Log.info(f"Processing analysis job {job_id}")
        context = PipelineContext(job_id=job_id)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = str(exc) or type(exc).__name__
            try:
                self._failed_step.run(context)
            except Exception as mark_exc:
                Log.error(
                    f"Could not mark job {job_id} as failed, it stays processing: {mark_exc}"
                )
            raise
        return context


def build_processor(
    settings: Settings,
    job_repo: JobRepository,
    findings_repo: FindingsRepository | None = None,
    files_root: Path | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    fetcher = ImageFetcher(
        files_root=files_root if files_root is not None else Path(settings.files_root),
        timeout_seconds=settings.fetch_timeout_seconds,
    )
    findings_repo = findings_repo if findings_repo is not None else FindingsRepository()

    detectors: list[BaseDetector] = [RuleDetector()]
    vision_detector = VisionDetectorFactory.create(settings, fetcher)
    if vision_detector is not None:
        detectors.append(vision_detector)

    steps: list[PipelineStep] = [
        LoadJobStep(job_repo),
        ExtractMetadataStep(ImageMetadataExtractor(fetcher)),
        DetectStep(detectors),
        MergeStep(),
        PersistFindingsStep(findings_repo),
        PersistSummaryStep(findings_repo),
        MarkCompletedStep(job_repo),
    ]
    return Processor(steps=steps, failed_step=MarkFailedStep(job_repo))
