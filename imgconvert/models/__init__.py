"""Models package for the image converter."""

from .conversion import (
    ConversionErrorKind,
    ConversionResult,
    ConversionSettings,
    ConversionStatus,
    DecodedImage,
    OutputFormat,
)

__all__ = [
    "ConversionErrorKind",
    "ConversionResult",
    "ConversionSettings",
    "ConversionStatus",
    "DecodedImage",
    "OutputFormat",
]
