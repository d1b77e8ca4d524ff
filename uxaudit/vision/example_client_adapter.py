"""Example vision client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseVisionClient and register the provider in VisionDetectorFactory.
"""

import json
from typing import ClassVar

from uxaudit.vision.client_base import BaseVisionClient


class ExampleClientAdapter(BaseVisionClient):
    """Example adapter that returns a fixed, valid findings reply.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "issues": [
            {
                "issue_type": "accessibility",
                "severity": "warning",
                "title": "Icon button without visible label",
                "description": (
                    "The icon-only control in the header has no visible text label. "
                    "Add a label or tooltip so its purpose is clear."
                ),
                "x": 16,
                "y": 16,
                "width": 48,
                "height": 48,
                "rule_id": "icon-label",
            }
        ]
    }

    def invoke(
        self,
        *,
        model: str,
        temperature: float,
        image_bytes: bytes,
        mime_type: str,
        instruction: str,
        timeout_seconds: float,
    ) -> str:
        _ = model, temperature, image_bytes, mime_type, instruction, timeout_seconds
        return "```json\n" + json.dumps(self.DEFAULT_RESPONSE) + "\n```"
