"""JPEG format handler."""

from io import BytesIO
from typing import Any, BinaryIO, Dict

import structlog
from PIL import Image

from imgconvert.core.conversion.formats.base import BaseFormatHandler, first_frame
from imgconvert.core.exceptions import ConversionFailedError, JpegDecodingError
from imgconvert.models.conversion import ConversionSettings

logger = structlog.get_logger()


class JPEGHandler(BaseFormatHandler):
    """Handler for JPEG format."""

    def __init__(self):
        """Initialize JPEG handler."""
        super().__init__()
        self.supported_formats = ["jpeg", "jpg", "jpe", "jfif"]
        self.format_name = "JPEG"

    def load_image(self, image_data: bytes) -> Image.Image:
        """Load JPEG image from bytes."""
        try:
            with BytesIO(image_data) as buffer:
                img = first_frame(Image.open(buffer))

            # Some JPEGs are stored in CMYK
            if img.mode == "CMYK":
                img = img.convert("RGB")

            return img

        except Exception as e:
            raise JpegDecodingError(
                f"Failed to load JPEG image: {str(e)}",
                details={"format": "JPEG", "error": str(e)},
            ) from e

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, settings: ConversionSettings
    ) -> None:
        """Save image as JPEG."""
        try:
            image = self.prepare_image(image)
            image.save(
                output_buffer, format=self.format_name, **self.get_save_params(settings)
            )

        except Exception as e:
            raise ConversionFailedError(
                f"Failed to save image as JPEG: {str(e)}",
                details={"output_format": "JPEG", "error": str(e)},
            ) from e

    def get_save_params(self, settings: ConversionSettings) -> Dict[str, Any]:
        """Get JPEG-specific quality parameters."""
        return {"quality": settings.jpeg_quality}

    def _supports_transparency(self) -> bool:
        """JPEG doesn't support transparency."""
        return False

    def _supports_mode(self, mode: str) -> bool:
        """Check if JPEG supports the given color mode."""
        return mode in ("RGB", "L")
