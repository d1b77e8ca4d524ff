import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from uxaudit.vision.exceptions import VisionPreprocessError

_PASSTHROUGH_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})


@dataclass(frozen=True)
class PreparedImage:
    """Image payload ready to send to the model."""

    content: bytes
    mime_type: str
    width: int
    height: int
    resized: bool = False


def prepare_image(
    image_bytes: bytes,
    max_dimension: int = 2048,
    jpeg_quality: int = 82,
) -> PreparedImage:
    """Downscale oversized images and re-encode them as JPEG.

    Images within max_dimension on both axes are passed through untouched
    when their format is one the model accepts; anything else is
    re-encoded. Aspect ratio is always preserved.

    Raises:
        VisionPreprocessError: if the bytes cannot be decoded or re-encoded.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            width, height = img.size
            mime_type = Image.MIME.get(img.format or "", "")
            oversized = width > max_dimension or height > max_dimension
            if not oversized and mime_type in _PASSTHROUGH_MIME_TYPES:
                return PreparedImage(
                    content=image_bytes, mime_type=mime_type, width=width, height=height
                )
            if oversized:
                img.thumbnail((max_dimension, max_dimension))
            converted = img.convert("RGB")
            buf = io.BytesIO()
            converted.save(buf, format="JPEG", quality=jpeg_quality, optimize=True)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise VisionPreprocessError(f"Failed to prepare image: {exc}") from exc

    return PreparedImage(
        content=buf.getvalue(),
        mime_type="image/jpeg",
        width=converted.width,
        height=converted.height,
        resized=oversized,
    )
