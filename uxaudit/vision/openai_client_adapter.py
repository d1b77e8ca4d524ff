import base64

import httpx
import openai

from uxaudit.vision.client_base import BaseVisionClient
from uxaudit.vision.exceptions import VisionNetworkError, VisionResponseError


class OpenAIClientAdapter(BaseVisionClient):
    """Vision client built on the OpenAI-compatible chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
        max_output_tokens: int = 2048,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )
        self._max_output_tokens = max_output_tokens

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
        data_url = f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=self._max_output_tokens,
                response_format={"type": "json_object"},
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": instruction},
                            {"type": "image_url", "image_url": {"url": data_url}},
                        ],
                    },
                ],
                timeout=timeout_seconds,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise VisionNetworkError(f"Vision provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise VisionNetworkError(f"Vision provider API error: {exc}") from exc

        if not response.choices:
            raise VisionResponseError("Vision provider returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise VisionResponseError("Vision provider returned empty response")
        return content
