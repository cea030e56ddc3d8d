"""Data models for image conversion."""

from enum import Enum
from typing import Optional

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

from imgconvert.core.constants import (
    DEFAULT_GIF_COLORS,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_TIFF_COMPRESSION,
    OUTPUT_FORMAT_ALIASES,
)
from imgconvert.core.exceptions import UnsupportedFormatError


class OutputFormat(str, Enum):
    """Supported output image formats."""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    BMP = "bmp"
    TIFF = "tiff"

    @classmethod
    def from_token(cls, token: str) -> "OutputFormat":
        """Parse a case-insensitive format token such as ``PNG`` or ``jpg``."""
        normalized = token.strip().lower()
        normalized = OUTPUT_FORMAT_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedFormatError(
                f"Unsupported output format: {token}",
                details={
                    "requested_format": token,
                    "supported_formats": cls.tokens(),
                },
            ) from None

    @classmethod
    def tokens(cls) -> list[str]:
        """All accepted tokens, aliases included."""
        names = [member.value for member in cls]
        return names + sorted(OUTPUT_FORMAT_ALIASES)


class ConversionStatus(str, Enum):
    """Status of image conversion."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class ConversionErrorKind(str, Enum):
    """Failure classes of a conversion run."""

    USAGE = "usage"
    INPUT_OPEN = "input_open"
    DECODE = "decode"
    OUTPUT_CREATE = "output_create"
    UNSUPPORTED_FORMAT = "unsupported_format"
    ENCODE = "encode"


class ConversionSettings(BaseModel):
    """Encoder settings. Fixed defaults, not exposed on the command line."""

    model_config = ConfigDict(frozen=True)

    jpeg_quality: int = Field(
        default=DEFAULT_JPEG_QUALITY, ge=1, le=95, description="JPEG quality"
    )
    gif_colors: int = Field(
        default=DEFAULT_GIF_COLORS, ge=2, le=256, description="GIF palette size"
    )
    tiff_compression: str = Field(
        default=DEFAULT_TIFF_COMPRESSION, description="Pillow TIFF compression name"
    )


class DecodedImage(BaseModel):
    """A decoded pixel buffer and the format it was decoded from."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    image: Image.Image
    source_format: str
    width: int
    height: int
    color_mode: str

    @classmethod
    def from_image(cls, image: Image.Image, source_format: str) -> "DecodedImage":
        return cls(
            image=image,
            source_format=source_format,
            width=image.width,
            height=image.height,
            color_mode=image.mode,
        )

    @property
    def dimensions(self) -> tuple[int, int]:
        """Return dimensions as tuple."""
        return (self.width, self.height)


class ConversionResult(BaseModel):
    """Result of image conversion."""

    model_config = ConfigDict(use_enum_values=True)

    status: ConversionStatus = ConversionStatus.PENDING
    error_kind: Optional[ConversionErrorKind] = None
    error_message: Optional[str] = None
    source_format: Optional[str] = None
    output_format: Optional[OutputFormat] = None
    requested_format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    output_size: Optional[int] = Field(None, description="Written file size in bytes")
    partial_output_removed: bool = False

    @property
    def succeeded(self) -> bool:
        return self.status == ConversionStatus.COMPLETED
