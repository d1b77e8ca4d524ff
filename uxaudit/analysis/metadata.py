import io

from PIL import Image, UnidentifiedImageError

from uxaudit.analysis.exceptions import ImageDecodeError
from uxaudit.analysis.models import ImageMetadata
from uxaudit.logging.logger import Log
from uxaudit.storage.image_fetcher import ImageFetcher


def read_metadata(image_bytes: bytes) -> ImageMetadata:
    """Derive width, height and format from encoded image bytes.

    Only the header is parsed; pixel data is never decoded.

    Raises:
        ImageDecodeError: if the bytes are not a recognizable image.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            width, height = img.size
            image_format = (img.format or "unknown").lower()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"Cannot decode image: {exc}") from exc
    return ImageMetadata(width=width, height=height, format=image_format)


class ImageMetadataExtractor:
    """Fetches an image and reports its dimensions and format."""

    def __init__(self, fetcher: ImageFetcher) -> None:
        self._fetcher = fetcher

    def extract(self, reference: str) -> ImageMetadata:
        """Fetch the referenced image and derive its metadata.

        Raises:
            FetchError: if the image cannot be fetched or decoded.
        """
        image_bytes = self._fetcher.fetch(reference)
        metadata = read_metadata(image_bytes)
        Log.info(
            f"Image {reference}: {metadata.width}x{metadata.height} {metadata.format}"
        )
        return metadata
