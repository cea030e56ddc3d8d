"""BMP format handler."""

from io import BytesIO
from typing import BinaryIO

import structlog
from PIL import Image

from imgconvert.core.conversion.formats.base import BaseFormatHandler
from imgconvert.core.exceptions import BmpDecodingError, ConversionFailedError
from imgconvert.models.conversion import ConversionSettings

logger = structlog.get_logger()


class BmpHandler(BaseFormatHandler):
    """Handler for BMP format."""

    def __init__(self):
        """Initialize BMP handler."""
        super().__init__()
        self.supported_formats = ["bmp", "dib"]
        self.format_name = "BMP"

    def load_image(self, image_data: bytes) -> Image.Image:
        """Load BMP image from bytes."""
        try:
            with BytesIO(image_data) as buffer:
                img = Image.open(buffer)
                img.load()

            # Normalize the many BMP bit depths to RGB/RGBA
            if img.mode == "P":
                if "transparency" in img.info:
                    img = img.convert("RGBA")
                else:
                    img = img.convert("RGB")
            elif img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGB")

            return img

        except Exception as e:
            raise BmpDecodingError(
                f"Failed to load BMP image: {str(e)}",
                details={"format": "BMP", "error": str(e)},
            ) from e

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, settings: ConversionSettings
    ) -> None:
        """Save image as BMP."""
        try:
            image = self.prepare_image(image)
            image.save(output_buffer, format=self.format_name)

        except Exception as e:
            raise ConversionFailedError(
                f"Failed to save image as BMP: {str(e)}",
                details={"output_format": "BMP", "error": str(e)},
            ) from e

    def _supports_transparency(self) -> bool:
        """BMP has limited transparency support."""
        return False

    def _supports_mode(self, mode: str) -> bool:
        """Check if BMP supports the given color mode."""
        return mode in ("RGB", "L", "1", "P")
