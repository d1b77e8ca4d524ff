import io
from collections.abc import Callable

import pytest
from PIL import Image


def _encode(width: int, height: int, image_format: str = "PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(240, 240, 240)).save(buf, format=image_format)
    return buf.getvalue()


@pytest.fixture()
def make_image_bytes() -> Callable[..., bytes]:
    """Factory producing an encoded solid-color image of the given size."""
    return _encode


@pytest.fixture()
def screenshot_png_bytes() -> bytes:
    """A 1920x1080 PNG, the size of a typical desktop screenshot."""
    return _encode(1920, 1080)
