"""Base format handler interface."""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict

from PIL import Image

from imgconvert.core.constants import FLATTEN_BACKGROUND_COLOR
from imgconvert.models.conversion import ConversionSettings


class BaseFormatHandler(ABC):
    """Abstract base class for format handlers."""

    def __init__(self) -> None:
        """Initialize format handler."""
        self.supported_formats: list[str] = []
        self.format_name: str = ""

    def can_handle(self, format_name: str) -> bool:
        """Check if this handler can process the given format."""
        return format_name.lower() in self.supported_formats

    @abstractmethod
    def load_image(self, image_data: bytes) -> Image.Image:
        """Load image from bytes."""

    @abstractmethod
    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, settings: ConversionSettings
    ) -> None:
        """Save image to buffer with given settings."""

    def get_save_params(self, settings: ConversionSettings) -> Dict[str, Any]:
        """Get format-specific encoder parameters."""
        return {}

    def prepare_image(self, image: Image.Image) -> Image.Image:
        """Prepare image for encoding (e.g., convert color mode if needed)."""
        image = reduce_bit_depth(image)

        if image.mode in ("RGBA", "LA") and not self._supports_transparency():
            return flatten_alpha(image)

        if image.mode == "P" and not self._supports_mode("P"):
            if "transparency" in image.info and not self._supports_transparency():
                return flatten_alpha(image.convert("RGBA"))
            return image.convert("RGB")

        if not self._supports_mode(image.mode):
            return image.convert("RGB")

        return image

    def _supports_transparency(self) -> bool:
        """Check if format supports transparency."""
        # Override in subclasses
        return False

    def _supports_mode(self, mode: str) -> bool:
        """Check if format supports the given color mode."""
        # Override in subclasses
        return mode in ("RGB", "RGBA")


def flatten_alpha(image: Image.Image) -> Image.Image:
    """Composite an image with an alpha channel onto a white background."""
    rgba = image.convert("RGBA")
    background = Image.new("RGB", rgba.size, FLATTEN_BACKGROUND_COLOR)
    background.paste(rgba, mask=rgba.split()[3])
    return background


def first_frame(image: Image.Image) -> Image.Image:
    """Return a standalone copy of the first frame of a possibly multi-frame image."""
    if getattr(image, "n_frames", 1) > 1:
        image.seek(0)
    image.load()
    return image.copy()


def reduce_bit_depth(image: Image.Image) -> Image.Image:
    """Scale 16-bit and 32-bit grayscale down to 8-bit ``L``.

    Samples are divided by 256, so 65535 becomes 255 instead of clipping
    everything above 255 to white. Float images are clipped to 0-255.
    """
    if image.mode.startswith("I;16") or image.mode == "I":
        return image.convert("I").point(lambda v: v * (1 / 256)).convert("L")
    if image.mode == "F":
        return image.convert("L")
    return image
