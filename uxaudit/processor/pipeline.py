import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from uxaudit.analysis.models import Finding, ImageMetadata, RunSummary
from uxaudit.database.models import JobRecord


@dataclass(slots=True)
class PipelineContext:
    job_id: str
    started_at: float = field(default_factory=time.monotonic)
    job: JobRecord | None = None
    metadata: ImageMetadata | None = None
    detector_findings: dict[str, list[Finding]] = field(default_factory=dict)
    findings: list[Finding] = field(default_factory=list)
    summary: RunSummary | None = None
    persistence_errors: list[str] = field(default_factory=list)
    error_message: str = ""

    def elapsed_seconds(self) -> float:
        return time.monotonic() - self.started_at


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
