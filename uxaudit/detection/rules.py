"""Deterministic, table-driven UX heuristics.

Each rule family pairs a fixed set of candidate regions with a metric and a
threshold table. Regions stand in for real pixel measurements; swapping in a
measuring implementation only requires another BaseDetector.
"""

from collections.abc import Callable
from dataclasses import dataclass

from uxaudit.analysis.geometry import clamp_box
from uxaudit.analysis.models import Finding, ImageMetadata, IssueType, Severity
from uxaudit.detection.base import BaseDetector

InclusionFilter = Callable[[int, int, int], bool]


@dataclass(frozen=True)
class Region:
    x: int
    y: int
    width: int
    height: int
    metric: float = 0.0


@dataclass(frozen=True)
class RuleFamily:
    key: str
    issue_type: IssueType
    regions: tuple[Region, ...]
    classify: Callable[[Region], Severity | None]
    title: str
    description: str


@dataclass(frozen=True)
class Candidate:
    family: RuleFamily
    index: int
    region: Region
    severity: Severity


def seeded_inclusion(width: int, height: int, index: int) -> bool:
    """Keep the candidate at ordinal index unless (width + height + index) % 3 == 0."""
    return (width + height + index) % 3 != 0


def contrast_severity(region: Region) -> Severity | None:
    if region.metric < 3.0:
        return Severity.ERROR
    if region.metric < 4.5:
        return Severity.WARNING
    return None


def spacing_severity(region: Region) -> Severity | None:
    if region.metric < 4:
        return Severity.ERROR
    if region.metric < 8:
        return Severity.WARNING
    return None


def touch_target_severity(region: Region) -> Severity | None:
    if region.width * region.height < 44 * 44:
        return Severity.ERROR
    return None


def text_size_severity(region: Region) -> Severity | None:
    if region.metric < 12:
        return Severity.ERROR
    if region.metric < 16:
        return Severity.WARNING
    return None


def alignment_severity(region: Region) -> Severity | None:
    if region.metric > 4:
        return Severity.WARNING
    if region.metric > 2:
        return Severity.INFO
    return None


def always_info(region: Region) -> Severity | None:
    return Severity.INFO


DEFAULT_CATALOG: tuple[RuleFamily, ...] = (
    RuleFamily(
        key="contrast",
        issue_type=IssueType.CONTRAST,
        regions=(
            Region(50, 100, 300, 40, metric=2.8),
            Region(50, 200, 250, 30, metric=3.2),
            Region(400, 150, 200, 50, metric=4.1),
        ),
        classify=contrast_severity,
        title="Low contrast text ({metric:.1f}:1)",
        description=(
            "Text in this area has a contrast ratio of {metric:.1f}:1, which is below "
            "WCAG AA standards (4.5:1 for normal text). Consider increasing the "
            "contrast between text and background colors."
        ),
    ),
    RuleFamily(
        key="spacing",
        issue_type=IssueType.SPACING,
        regions=(
            Region(100, 300, 400, 200, metric=4),
            Region(600, 400, 300, 150, metric=6),
        ),
        classify=spacing_severity,
        title="Tight spacing ({metric:.0f}px)",
        description=(
            "Elements in this area have only {metric:.0f}px of spacing between them. "
            "Recommended minimum is 8px for mobile and 16px for desktop. Increase "
            "spacing to improve readability and visual hierarchy."
        ),
    ),
    RuleFamily(
        key="accessibility-touch",
        issue_type=IssueType.ACCESSIBILITY,
        regions=(
            Region(50, 500, 30, 30),
            Region(200, 550, 35, 35),
        ),
        classify=touch_target_severity,
        title="Touch target too small ({width}x{height}px)",
        description=(
            "Interactive elements should have a minimum touch target of 44x44px (iOS) "
            "or 48x48px (Material Design). This element is {width}x{height}px, which "
            "may be difficult to tap on mobile devices."
        ),
    ),
    RuleFamily(
        key="accessibility-text",
        issue_type=IssueType.ACCESSIBILITY,
        regions=(
            Region(400, 600, 200, 20, metric=12),
            Region(100, 650, 150, 18, metric=14),
        ),
        classify=text_size_severity,
        title="Text size too small ({metric:.0f}px)",
        description=(
            "Body text should be at least 16px for readability. This text appears to "
            "be {metric:.0f}px, which may be difficult to read, especially on mobile "
            "devices."
        ),
    ),
    RuleFamily(
        key="layout-alignment",
        issue_type=IssueType.LAYOUT,
        regions=(
            Region(45, 100, 200, 100, metric=3),
            Region(253, 250, 150, 80, metric=5),
        ),
        classify=alignment_severity,
        title="Misaligned element ({metric:.0f}px offset)",
        description=(
            "This element is misaligned by {metric:.0f}px from the grid. Aligning "
            "elements to a consistent grid improves visual consistency and "
            "professional appearance."
        ),
    ),
    RuleFamily(
        key="layout-spacing",
        issue_type=IssueType.LAYOUT,
        regions=(Region(100, 400, 300, 200),),
        classify=always_info,
        title="Inconsistent spacing pattern",
        description=(
            "The spacing between elements in this area appears inconsistent. Consider "
            "using a spacing scale (e.g., 4px, 8px, 16px, 24px) for better visual rhythm."
        ),
    ),
)


class RuleDetector(BaseDetector):
    """Pure function of image dimensions: same width/height, same findings."""

    name = "rules"

    def __init__(
        self,
        catalog: tuple[RuleFamily, ...] = DEFAULT_CATALOG,
        include: InclusionFilter = seeded_inclusion,
    ) -> None:
        self._catalog = catalog
        self._include = include

    def detect(self, reference: str, metadata: ImageMetadata) -> list[Finding]:
        return self.analyze(metadata.width, metadata.height)

    def analyze(self, width: int, height: int) -> list[Finding]:
        """Run every rule family, then apply the inclusion filter by ordinal index."""
        candidates = self.candidates()
        findings: list[Finding] = []
        for ordinal, candidate in enumerate(candidates):
            if not self._include(width, height, ordinal):
                continue
            finding = self._to_finding(candidate, width, height)
            if finding is not None:
                findings.append(finding)
        return findings

    def candidates(self) -> list[Candidate]:
        """Regions whose metric crosses a threshold, in catalog order."""
        result: list[Candidate] = []
        for family in self._catalog:
            for index, region in enumerate(family.regions):
                severity = family.classify(region)
                if severity is not None:
                    result.append(
                        Candidate(family=family, index=index, region=region, severity=severity)
                    )
        return result

    def _to_finding(self, candidate: Candidate, width: int, height: int) -> Finding | None:
        region = candidate.region
        box = clamp_box(region.x, region.y, region.width, region.height, width, height)
        if box is None:
            return None
        fields = {"metric": region.metric, "width": region.width, "height": region.height}
        return Finding(
            issue_type=candidate.family.issue_type,
            severity=candidate.severity,
            title=candidate.family.title.format(**fields),
            description=candidate.family.description.format(**fields),
            x=box.x,
            y=box.y,
            width=box.width,
            height=box.height,
            rule_id=f"{self.name}:{candidate.family.key}-{candidate.index}",
        )
