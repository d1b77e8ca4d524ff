from typing import ClassVar

from uxaudit.config.settings import Settings
from uxaudit.logging.logger import Log
from uxaudit.storage.image_fetcher import ImageFetcher
from uxaudit.vision.client_base import BaseVisionClient
from uxaudit.vision.detector import VisionDetector
from uxaudit.vision.example_client_adapter import ExampleClientAdapter
from uxaudit.vision.openai_client_adapter import OpenAIClientAdapter


class VisionDetectorFactory:
    """Creates the configured vision detector, or None when it is disabled."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "ollama": "http://localhost:11434/v1",
    }

    KEYLESS_PROVIDERS: ClassVar[frozenset[str]] = frozenset({"ollama", "openai_compatible"})

    @classmethod
    def create(cls, settings: Settings, fetcher: ImageFetcher) -> VisionDetector | None:
        """Create a vision detector from application settings."""
        provider = settings.vision_provider.lower()
        cls._require_known(provider)
        if provider == "none":
            Log.info("Vision detector disabled by configuration")
            return None
        if (
            provider not in cls.KEYLESS_PROVIDERS
            and provider != "example"
            and not settings.vision_api_key
        ):
            Log.warning(f"Vision provider '{provider}' has no API key; running rule detector only")
            return None
        return VisionDetector(
            client=cls._create_client(provider, settings),
            fetcher=fetcher,
            model="example" if provider == "example" else settings.vision_model_name,
            temperature=settings.vision_temperature,
            timeout_seconds=settings.vision_timeout_seconds,
            max_findings=settings.vision_max_findings,
            max_dimension=settings.vision_image_max_dim,
            jpeg_quality=settings.vision_jpeg_quality,
        )

    @classmethod
    def supported_providers(cls) -> list[str]:
        return [
            "none",
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]

    @classmethod
    def _require_known(cls, provider: str) -> None:
        supported = cls.supported_providers()
        if provider not in supported:
            raise ValueError(f"Unknown vision provider '{provider}'. Choose from: {supported}")

    @classmethod
    def _create_client(cls, provider: str, settings: Settings) -> BaseVisionClient:
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            # the SDK rejects an empty key even for servers that ignore it
            api_key=settings.vision_api_key or "unused",
            timeout_seconds=settings.vision_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        override = settings.vision_base_url.strip()
        if override:
            return override
        if provider == "openai_compatible":
            raise ValueError(
                "vision_base_url is required for vision_provider=openai_compatible"
            )
        return cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
