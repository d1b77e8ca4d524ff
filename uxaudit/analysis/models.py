from dataclasses import dataclass
from enum import StrEnum


class JobStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class IssueType(StrEnum):
    CONTRAST = "contrast"
    SPACING = "spacing"
    ACCESSIBILITY = "accessibility"
    LAYOUT = "layout"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


CLAIMABLE_STATUSES = frozenset({JobStatus.PENDING, JobStatus.FAILED})


@dataclass(frozen=True)
class ImageMetadata:
    """Pixel dimensions and format of the analyzed image."""

    width: int
    height: int
    format: str = "unknown"

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class BoundingBox:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Finding:
    """A single UX issue reported by a detector.

    rule_id carries provenance as "<detector>:<rule>", e.g. "rules:contrast-1"
    or "vision:v1:0".
    """

    issue_type: IssueType
    severity: Severity
    title: str
    description: str
    x: int
    y: int
    width: int
    height: int
    rule_id: str

    @property
    def detector(self) -> str:
        return self.rule_id.split(":", 1)[0]


@dataclass(frozen=True)
class RunSummary:
    """Aggregate numbers for one completed run, upserted per job."""

    image_width: int
    image_height: int
    total_issues: int
    analysis_duration_ms: int


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result returned by the run_analysis entry point."""

    job_id: str
    status: JobStatus
    total_issues: int = 0
    claimed: bool = True
    error: str | None = None
