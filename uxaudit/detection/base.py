from abc import ABC, abstractmethod

from uxaudit.analysis.models import Finding, ImageMetadata


class BaseDetector(ABC):
    """Contract for all finding detectors."""

    name: str = "detector"

    @abstractmethod
    def detect(self, reference: str, metadata: ImageMetadata) -> list[Finding]:
        """Produce findings for one image.

        Args:
            reference: Storage reference of the source image.
            metadata: Dimensions already captured for this run.

        Returns:
            Findings in detector order, each tagged with this detector's
            provenance and inside the image bounds.
        """
