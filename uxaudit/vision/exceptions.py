class VisionError(Exception):
    """Raised when the vision detector cannot produce findings."""


class VisionNetworkError(VisionError):
    """Raised when the model provider call fails due to network/infrastructure issues."""


class VisionTimeoutError(VisionError):
    """Raised when the model call does not finish before its deadline."""


class VisionResponseError(VisionError):
    """Raised when the model reply is empty or contains no JSON object."""


class VisionValidationError(VisionError):
    """Raised when the model reply violates the findings schema."""


class VisionPreprocessError(VisionError):
    """Raised when the image cannot be prepared for the model."""
