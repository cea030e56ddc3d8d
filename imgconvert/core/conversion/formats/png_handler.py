"""PNG format handler."""

from io import BytesIO
from typing import BinaryIO

import structlog
from PIL import Image

from imgconvert.core.conversion.formats.base import BaseFormatHandler, reduce_bit_depth
from imgconvert.core.exceptions import ConversionFailedError, PngDecodingError
from imgconvert.models.conversion import ConversionSettings

logger = structlog.get_logger()


class PNGHandler(BaseFormatHandler):
    """Handler for PNG format."""

    def __init__(self) -> None:
        """Initialize PNG handler."""
        super().__init__()
        self.supported_formats = ["png"]
        self.format_name = "PNG"

    def load_image(self, image_data: bytes) -> Image.Image:
        """Load PNG image from bytes."""
        try:
            with BytesIO(image_data) as buffer:
                img = Image.open(buffer)
                # Read pixel data before the buffer closes
                img.load()
                return img

        except Exception as e:
            raise PngDecodingError(
                f"Failed to load PNG image: {str(e)}",
                details={"format": "PNG", "error": str(e)},
            ) from e

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, settings: ConversionSettings
    ) -> None:
        """Save image as PNG (lossless, modes kept as-is where possible)."""
        try:
            if not self._supports_mode(image.mode):
                image = reduce_bit_depth(image)

            if not self._supports_mode(image.mode):
                if "transparency" in image.info or "A" in image.mode:
                    image = image.convert("RGBA")
                else:
                    image = image.convert("RGB")

            image.save(output_buffer, format=self.format_name)

        except Exception as e:
            raise ConversionFailedError(
                f"Failed to save image as PNG: {str(e)}",
                details={"output_format": "PNG", "error": str(e)},
            ) from e

    def _supports_transparency(self) -> bool:
        """PNG supports transparency."""
        return True

    def _supports_mode(self, mode: str) -> bool:
        """Check if PNG supports the given color mode."""
        return mode in ("RGB", "RGBA", "L", "LA", "P", "1", "I", "I;16")
