from pathlib import Path

from uxaudit.analysis.models import IssueType, Severity
from uxaudit.vision.exceptions import VisionError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Load the vision instruction template from a file.

    Args:
        path: Path to the prompt template file.
              Defaults to the bundled vision_prompt.txt.

    Raises:
        VisionError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "vision_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise VisionError(f"Failed to load prompt template: {exc}") from exc


def build_instruction(template: str, width: int, height: int, max_findings: int) -> str:
    """Fill the template with the original image size and the closed value sets."""
    return template.format(
        width=width,
        height=height,
        max_findings=max_findings,
        issue_types=", ".join(f'"{t.value}"' for t in IssueType),
        severities=", ".join(f'"{s.value}"' for s in Severity),
    )
