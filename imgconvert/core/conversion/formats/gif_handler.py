"""GIF format handler."""

from io import BytesIO
from typing import BinaryIO

import structlog
from PIL import Image

from imgconvert.core.constants import GIF_ALPHA_THRESHOLD
from imgconvert.core.conversion.formats.base import (
    BaseFormatHandler,
    first_frame,
    reduce_bit_depth,
)
from imgconvert.core.exceptions import ConversionFailedError, GifDecodingError
from imgconvert.models.conversion import ConversionSettings

logger = structlog.get_logger()


class GifHandler(BaseFormatHandler):
    """Handler for GIF format."""

    def __init__(self) -> None:
        """Initialize GIF handler."""
        super().__init__()
        self.supported_formats = ["gif"]
        self.format_name = "GIF"

    def load_image(self, image_data: bytes) -> Image.Image:
        """Load GIF image from bytes (first frame only)."""
        try:
            with BytesIO(image_data) as buffer:
                img = Image.open(buffer)
                n_frames = getattr(img, "n_frames", 1)
                if n_frames > 1:
                    logger.debug(
                        "Animated GIF detected, extracting first frame",
                        n_frames=n_frames,
                    )
                img = first_frame(img)

            # GIF uses palette mode with potential transparency
            if img.mode == "P":
                if "transparency" in img.info:
                    img = img.convert("RGBA")
                else:
                    img = img.convert("RGB")
            elif img.mode not in ("RGB", "RGBA", "L"):
                img = img.convert("RGB")

            return img

        except Exception as e:
            raise GifDecodingError(
                f"Failed to load GIF image: {str(e)}",
                details={"format": "GIF", "error": str(e)},
            ) from e

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, settings: ConversionSettings
    ) -> None:
        """Save image as a single-frame GIF with an adaptive palette."""
        try:
            image = reduce_bit_depth(image)
            save_params = {}

            if image.mode in ("RGBA", "LA", "PA") or (
                image.mode == "P" and "transparency" in image.info
            ):
                image, transparent_index = self._quantize_with_alpha(
                    image.convert("RGBA"), settings.gif_colors
                )
                if transparent_index is not None:
                    save_params["transparency"] = transparent_index
            elif image.mode not in ("P", "L", "1"):
                image = image.convert(
                    "P", palette=Image.Palette.ADAPTIVE, colors=settings.gif_colors
                )

            image.save(output_buffer, format=self.format_name, **save_params)

        except Exception as e:
            raise ConversionFailedError(
                f"Failed to save image as GIF: {str(e)}",
                details={"output_format": "GIF", "error": str(e)},
            ) from e

    def _quantize_with_alpha(self, image: Image.Image, colors: int):
        """Quantize an RGBA image, reserving the last palette slot for transparency.

        Pixels with alpha below the threshold map to that slot. Returns the
        palette image and the transparent index, or None when every pixel is
        opaque enough to keep its color.
        """
        alpha = image.getchannel("A")
        if alpha.getextrema()[0] >= GIF_ALPHA_THRESHOLD:
            quantized = image.convert("RGB").convert(
                "P", palette=Image.Palette.ADAPTIVE, colors=colors
            )
            return quantized, None

        transparent_index = colors - 1
        quantized = image.convert("RGB").convert(
            "P", palette=Image.Palette.ADAPTIVE, colors=colors - 1
        )
        # Pad the palette so the reserved index exists
        palette = quantized.getpalette()
        quantized.putpalette(palette + [0] * (768 - len(palette)))
        mask = alpha.point(lambda a: 255 if a < GIF_ALPHA_THRESHOLD else 0)
        quantized.paste(transparent_index, mask=mask)
        return quantized, transparent_index

    def _supports_transparency(self) -> bool:
        """GIF supports single-color transparency."""
        return True

    def _supports_mode(self, mode: str) -> bool:
        """Check if GIF supports the given color mode."""
        return mode in ("P", "L", "1")
