"""TIFF format handler."""

from io import BytesIO
from typing import Any, BinaryIO, Dict

import structlog
from PIL import Image

from imgconvert.core.conversion.formats.base import (
    BaseFormatHandler,
    first_frame,
    reduce_bit_depth,
)
from imgconvert.core.exceptions import ConversionFailedError, TiffDecodingError
from imgconvert.models.conversion import ConversionSettings

logger = structlog.get_logger()


class TiffHandler(BaseFormatHandler):
    """Handler for TIFF format."""

    def __init__(self):
        """Initialize TIFF handler."""
        super().__init__()
        self.supported_formats = ["tiff", "tif"]
        self.format_name = "TIFF"

    def load_image(self, image_data: bytes) -> Image.Image:
        """Load TIFF image from bytes (first page only)."""
        try:
            with BytesIO(image_data) as buffer:
                img = Image.open(buffer)
                n_frames = getattr(img, "n_frames", 1)
                if n_frames > 1:
                    logger.debug(
                        "Multi-page TIFF detected, extracting first frame",
                        n_frames=n_frames,
                    )
                img = first_frame(img)

            img = reduce_bit_depth(img)
            if img.mode == "CMYK":
                img = img.convert("RGB")
            elif img.mode not in ("RGB", "RGBA", "L", "LA", "1"):
                if "transparency" in img.info:
                    img = img.convert("RGBA")
                else:
                    img = img.convert("RGB")

            return img

        except Exception as e:
            raise TiffDecodingError(
                f"Failed to load TIFF image: {str(e)}",
                details={"format": "TIFF", "error": str(e)},
            ) from e

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, settings: ConversionSettings
    ) -> None:
        """Save image as TIFF."""
        try:
            image = reduce_bit_depth(image)
            if not self._supports_mode(image.mode):
                if "transparency" in image.info or image.mode == "PA":
                    image = image.convert("RGBA")
                else:
                    image = image.convert("RGB")

            image.save(
                output_buffer, format=self.format_name, **self.get_save_params(settings)
            )

        except Exception as e:
            raise ConversionFailedError(
                f"Failed to save image as TIFF: {str(e)}",
                details={"output_format": "TIFF", "error": str(e)},
            ) from e

    def get_save_params(self, settings: ConversionSettings) -> Dict[str, Any]:
        """Get TIFF compression parameters."""
        return {"compression": settings.tiff_compression}

    def _supports_transparency(self) -> bool:
        """TIFF supports transparency through alpha channel."""
        return True

    def _supports_mode(self, mode: str) -> bool:
        """Check if TIFF supports the given color mode."""
        return mode in ("RGB", "RGBA", "L", "LA", "CMYK", "1")
