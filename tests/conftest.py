"""Pytest fixtures for imgconvert tests."""

import logging
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from imgconvert.models.conversion import ConversionSettings

# Pillow save() names for each canonical format
PIL_FORMATS = {
    "jpeg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "bmp": "BMP",
    "tiff": "TIFF",
}


def make_image_bytes(
    format_name: str, size=(100, 50), mode: str = "RGB", color="red"
) -> bytes:
    """Render a solid test image in the given format."""
    img = Image.new(mode, size, color)
    buffer = BytesIO()
    img.save(buffer, format=PIL_FORMATS[format_name])
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to CliRunner streams between tests."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)


@pytest.fixture
def settings():
    """Default encoder settings."""
    return ConversionSettings()


@pytest.fixture
def image_file(tmp_path):
    """Factory writing a generated image to disk and returning its path."""

    def _make(
        format_name: str,
        name: str = None,
        size=(100, 50),
        mode: str = "RGB",
        color="red",
    ) -> Path:
        path = tmp_path / (name or f"sample.{format_name}")
        path.write_bytes(make_image_bytes(format_name, size, mode, color))
        return path

    return _make


@pytest.fixture
def gradient_image():
    """RGBA image where every pixel differs, for lossless checks."""
    img = Image.new("RGBA", (64, 32))
    img.putdata(
        [
            (x * 4, y * 8, (x + y) % 256, 255 - x)
            for y in range(32)
            for x in range(64)
        ]
    )
    return img
