"""Second-opinion detector backed by an external vision-language model."""

from pathlib import Path

from uxaudit.analysis.geometry import clamp_box
from uxaudit.analysis.models import Finding, ImageMetadata
from uxaudit.detection.base import BaseDetector
from uxaudit.logging.logger import Log
from uxaudit.storage.image_fetcher import ImageFetcher
from uxaudit.vision.client_base import BaseVisionClient
from uxaudit.vision.deadline import Deadline, run_with_deadline
from uxaudit.vision.preprocess import PreparedImage, prepare_image
from uxaudit.vision.prompt_loader import build_instruction, load_prompt_template
from uxaudit.vision.validator import VisionCandidate, parse_candidates


class VisionDetector(BaseDetector):
    """Asks a vision model for findings and keeps only validated, clamped ones.

    detect() is fail-open: any error while fetching, preprocessing, calling
    the model or validating its reply yields an empty list.
    """

    name = "vision"

    def __init__(
        self,
        *,
        client: BaseVisionClient,
        fetcher: ImageFetcher,
        model: str,
        temperature: float = 0.2,
        timeout_seconds: float = 30,
        max_findings: int = 15,
        max_dimension: int = 2048,
        jpeg_quality: int = 82,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._client = client
        self._fetcher = fetcher
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._timeout_seconds = timeout_seconds
        self._max_findings = max_findings
        self._max_dimension = max_dimension
        self._jpeg_quality = jpeg_quality
        self._prompt_template = load_prompt_template(prompt_template_path)

    def detect(self, reference: str, metadata: ImageMetadata) -> list[Finding]:
        try:
            return self.analyze(reference, metadata)
        except Exception as exc:
            Log.warning(
                f"Vision detector failed for {reference}, continuing without it: "
                f"{type(exc).__name__}: {exc}"
            )
            return []

    def analyze(
        self,
        reference: str,
        metadata: ImageMetadata,
        deadline: Deadline | None = None,
    ) -> list[Finding]:
        """Run the detector and raise on failure.

        Args:
            deadline: Bound for the model call. A fresh one of
                timeout_seconds is started right before the call when omitted.

        Raises:
            FetchError, VisionError: on any failure before findings are built.
        """
        if not metadata.has_area:
            Log.warning(f"Skipping vision analysis of empty image {reference}")
            return []

        prepared = prepare_image(
            self._fetcher.fetch(reference),
            max_dimension=self._max_dimension,
            jpeg_quality=self._jpeg_quality,
        )
        if prepared.resized:
            Log.info(
                f"Downscaled {metadata.width}x{metadata.height} image to "
                f"{prepared.width}x{prepared.height} for vision model"
            )

        instruction = build_instruction(
            self._prompt_template,
            width=metadata.width,
            height=metadata.height,
            max_findings=self._max_findings,
        )
        Log.debug(f"Vision instruction:\n{instruction}")

        if deadline is None:
            deadline = Deadline.after(self._timeout_seconds)
        raw_response = self._call_model(prepared, instruction, deadline)
        Log.debug(f"Vision raw response:\n{raw_response}")

        candidates = parse_candidates(raw_response, self._max_findings)
        findings = self._to_findings(candidates, metadata)
        Log.info(
            f"Vision detector kept {len(findings)} of {len(candidates)} findings for {reference}"
        )
        return findings

    def _call_model(self, image: PreparedImage, instruction: str, deadline: Deadline) -> str:
        return run_with_deadline(
            lambda: self._client.invoke(
                model=self._model,
                temperature=self._temperature,
                image_bytes=image.content,
                mime_type=image.mime_type,
                instruction=instruction,
                timeout_seconds=deadline.remaining(),
            ),
            deadline,
            what="vision model call",
        )

    def _to_findings(
        self,
        candidates: list[VisionCandidate],
        metadata: ImageMetadata,
    ) -> list[Finding]:
        findings: list[Finding] = []
        for index, candidate in enumerate(candidates):
            box = clamp_box(
                candidate.x,
                candidate.y,
                candidate.width,
                candidate.height,
                metadata.width,
                metadata.height,
            )
            if box is None:
                continue
            findings.append(
                Finding(
                    issue_type=candidate.issue_type,
                    severity=candidate.severity,
                    title=candidate.title,
                    description=candidate.description,
                    x=box.x,
                    y=box.y,
                    width=box.width,
                    height=box.height,
                    rule_id=f"{self.name}:{candidate.rule_id or f'v1:{index}'}",
                )
            )
        return findings
