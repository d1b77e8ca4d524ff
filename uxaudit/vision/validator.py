"""Extracts and validates the JSON findings object from a model reply."""

import json
import math
import re
from dataclasses import dataclass
from typing import Any

from uxaudit.analysis.models import IssueType, Severity
from uxaudit.vision.exceptions import VisionResponseError, VisionValidationError

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.IGNORECASE | re.DOTALL)
_VALID_ISSUE_TYPES = frozenset(t.value for t in IssueType)
_VALID_SEVERITIES = frozenset(s.value for s in Severity)
_GEOMETRY_FIELDS = ("x", "y", "width", "height")


@dataclass(frozen=True)
class VisionCandidate:
    """A schema-valid finding before its geometry is clamped."""

    issue_type: IssueType
    severity: Severity
    title: str
    description: str
    x: float
    y: float
    width: float
    height: float
    rule_id: str | None = None


def extract_json_text(raw: str) -> str:
    """Return the JSON object text from a reply.

    A fenced code block wins; otherwise the span from the first "{" to the
    last "}" is used.

    Raises:
        VisionResponseError: if no object-like span exists.
    """
    fence = _FENCE_RE.search(raw)
    if fence and fence.group(1):
        return fence.group(1).strip()
    first = raw.find("{")
    last = raw.rfind("}")
    if first >= 0 and last > first:
        return raw[first : last + 1].strip()
    raise VisionResponseError("Model reply contains no JSON object")


def parse_candidates(raw: str, max_findings: int) -> list[VisionCandidate]:
    """Parse and validate a model reply into candidates.

    Raises:
        VisionResponseError: if the reply holds no parseable JSON object.
        VisionValidationError: on any schema violation.
    """
    text = extract_json_text(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise VisionResponseError(f"Invalid JSON in model reply: {exc}") from exc
    if not isinstance(data, dict):
        raise VisionValidationError("Model reply must be a JSON object")
    return validate_and_build(data, max_findings)


def validate_and_build(data: dict[str, Any], max_findings: int) -> list[VisionCandidate]:
    """Validate the parsed reply; a missing "issues" key means no findings."""
    raw_issues = data.get("issues", [])
    if not isinstance(raw_issues, list):
        raise VisionValidationError("'issues' must be a list")
    candidates = [_build_candidate(item, i) for i, item in enumerate(raw_issues)]
    return candidates[:max_findings]


def _build_candidate(raw: Any, index: int) -> VisionCandidate:
    if not isinstance(raw, dict):
        raise VisionValidationError(f"Issue at index {index} must be an object")

    issue_type = raw.get("issue_type")
    if issue_type not in _VALID_ISSUE_TYPES:
        raise VisionValidationError(
            f"Issue at index {index}: 'issue_type' must be one of "
            f"{sorted(_VALID_ISSUE_TYPES)}, got {issue_type!r}"
        )
    severity = raw.get("severity")
    if severity not in _VALID_SEVERITIES:
        raise VisionValidationError(
            f"Issue at index {index}: 'severity' must be one of "
            f"{sorted(_VALID_SEVERITIES)}, got {severity!r}"
        )
    title = _require_text(raw, "title", index)
    description = _require_text(raw, "description", index)
    geometry = {name: _require_number(raw, name, index) for name in _GEOMETRY_FIELDS}

    rule_id = raw.get("rule_id")
    if rule_id is not None and not isinstance(rule_id, str):
        raise VisionValidationError(
            f"Issue at index {index}: 'rule_id' must be a string when present"
        )

    return VisionCandidate(
        issue_type=IssueType(issue_type),
        severity=Severity(severity),
        title=title,
        description=description,
        rule_id=rule_id or None,
        **geometry,
    )


def _require_text(raw: dict[str, Any], field: str, index: int) -> str:
    value = raw.get(field)
    if not isinstance(value, str) or not value.strip():
        raise VisionValidationError(
            f"Issue at index {index}: '{field}' must be a non-empty string"
        )
    return value


def _require_number(raw: dict[str, Any], field: str, index: int) -> float:
    value = raw.get(field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise VisionValidationError(f"Issue at index {index}: '{field}' must be a number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise VisionValidationError(
            f"Issue at index {index}: '{field}' is out of range"
        ) from exc
    if not math.isfinite(number):
        raise VisionValidationError(f"Issue at index {index}: '{field}' must be finite")
    return number
