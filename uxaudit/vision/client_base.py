from abc import ABC, abstractmethod


class BaseVisionClient(ABC):
    """Contract for provider-specific vision model clients."""

    @abstractmethod
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
        """Send one image plus instruction and return the reply as plain text.

        Raises:
            VisionNetworkError: on transport failure, timeout or non-success status.
            VisionResponseError: if the provider returns no text.
        """
