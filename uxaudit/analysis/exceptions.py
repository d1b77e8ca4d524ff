class AnalysisError(Exception):
    """Base exception for all analysis pipeline errors."""


class JobNotFoundError(AnalysisError):
    """Raised when an analysis job cannot be found in the database."""


class FetchError(AnalysisError):
    """Raised when the source image cannot be fetched from storage."""


class UnsupportedReferenceError(FetchError):
    """Raised when a file reference uses an unsupported scheme."""


class ImageDecodeError(FetchError):
    """Raised when fetched bytes are not a decodable image."""


class PersistenceError(AnalysisError):
    """Raised when findings or the run summary cannot be written."""
