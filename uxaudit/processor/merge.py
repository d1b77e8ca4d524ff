from collections.abc import Sequence

from uxaudit.analysis.models import Finding, ImageMetadata, RunSummary


def merge_findings(*detector_outputs: Sequence[Finding]) -> list[Finding]:
    """Concatenate detector outputs in the order given.

    Each detector's internal order and provenance are kept. Overlapping
    findings from different detectors are not deduplicated.
    """
    merged: list[Finding] = []
    for output in detector_outputs:
        merged.extend(output)
    return merged


def build_summary(
    findings: Sequence[Finding],
    metadata: ImageMetadata,
    elapsed_seconds: float,
) -> RunSummary:
    return RunSummary(
        image_width=metadata.width,
        image_height=metadata.height,
        total_issues=len(findings),
        analysis_duration_ms=max(0, int(round(elapsed_seconds * 1000))),
    )
