from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from uxaudit.vision.exceptions import VisionNetworkError, VisionResponseError
from uxaudit.vision.openai_client_adapter import OpenAIClientAdapter


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _invoke(adapter: OpenAIClientAdapter) -> str:
    return adapter.invoke(
        model="m",
        temperature=0.2,
        image_bytes=b"\x89PNG",
        mime_type="image/png",
        instruction="find issues",
        timeout_seconds=12.5,
    )


def _make_adapter(mock_client: MagicMock) -> OpenAIClientAdapter:
    with patch(
        "uxaudit.vision.openai_client_adapter.openai.OpenAI",
        return_value=mock_client,
    ):
        return OpenAIClientAdapter(api_key="k", timeout_seconds=30, base_url=None)


class TestOpenAIClientAdapter:
    def test_returns_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response('{"issues": []}')
        adapter = _make_adapter(mock_client)

        assert _invoke(adapter) == '{"issues": []}'

    def test_sends_image_as_data_url_with_timeout(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("{}")
        adapter = _make_adapter(mock_client)

        _invoke(adapter)

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        content = kwargs["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "find issues"}
        assert content[1]["image_url"]["url"] == "data:image/png;base64,iVBORw=="
        assert kwargs["timeout"] == 12.5
        assert kwargs["temperature"] == 0.2

    def test_disables_sdk_retries(self) -> None:
        with patch("uxaudit.vision.openai_client_adapter.openai.OpenAI") as mock_cls:
            OpenAIClientAdapter(api_key="k", timeout_seconds=30, base_url="http://x/v1")

        mock_cls.assert_called_once_with(
            api_key="k", timeout=30, base_url="http://x/v1", max_retries=0
        )

    def test_raises_error_for_empty_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(None)
        adapter = _make_adapter(mock_client)

        with pytest.raises(VisionResponseError, match="empty response"):
            _invoke(adapter)

    def test_raises_error_for_no_choices(self) -> None:
        mock_client = MagicMock()
        response = MagicMock()
        response.choices = []
        mock_client.chat.completions.create.return_value = response
        adapter = _make_adapter(mock_client)

        with pytest.raises(VisionResponseError, match="no choices"):
            _invoke(adapter)

    def test_raises_network_error_on_connection_failure(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=MagicMock()
        )
        adapter = _make_adapter(mock_client)

        with pytest.raises(VisionNetworkError, match="network error"):
            _invoke(adapter)

    def test_raises_network_error_on_timeout(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = httpx.TimeoutException("timeout")
        adapter = _make_adapter(mock_client)

        with pytest.raises(VisionNetworkError, match="network error"):
            _invoke(adapter)

    def test_raises_network_error_on_api_error(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIError(
            message="server error",
            request=MagicMock(),
            body=None,
        )
        adapter = _make_adapter(mock_client)

        with pytest.raises(VisionNetworkError, match="API error"):
            _invoke(adapter)
