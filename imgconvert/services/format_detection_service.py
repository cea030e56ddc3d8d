"""
Format Detection Service - image format detection from file content
Detects the actual image format regardless of file extension
"""

from io import BytesIO
from typing import Optional, Tuple

import structlog
from PIL import Image

from imgconvert.core.constants import (
    FORMAT_ALIASES,
    IMAGE_MAGIC_BYTES,
    MIN_DETECTION_BYTES,
    SUPPORTED_INPUT_FORMATS,
)
from imgconvert.core.exceptions import InvalidImageError

logger = structlog.get_logger()


class FormatDetectionService:
    """Service for detecting image formats from file content."""

    def __init__(self):
        """Initialize format detection service."""
        # PIL format to our format mapping
        self._pil_format_map = {
            "JPEG": "jpeg",
            "MPO": "jpeg",
            "PNG": "png",
            "GIF": "gif",
            "BMP": "bmp",
            "DIB": "bmp",
            "TIFF": "tiff",
            "WEBP": "webp",
            "ICO": "ico",
        }

    def detect_format(self, image_data: bytes) -> Tuple[str, bool]:
        """
        Detect image format from file content.

        Args:
            image_data: Raw image data

        Returns:
            Tuple of (detected_format, is_confident)
            - detected_format: The detected format name (e.g., 'jpeg', 'png')
            - is_confident: Whether the detection is confident (True) or a guess (False)

        Raises:
            InvalidImageError: If the data is empty or matches no known format
        """
        if not image_data or len(image_data) < MIN_DETECTION_BYTES:
            raise InvalidImageError(
                "image: unknown format (input is empty or too short)",
                details={"error": "empty"},
            )

        # First try: magic bytes
        format_name, confident = self._detect_by_magic_bytes(image_data)
        if format_name and confident:
            logger.debug(
                "Format detected by magic bytes", format=format_name, confident=True
            )
            return self._normalize_format_name(format_name), True

        # Second try: PIL identification
        pil_format = self._detect_by_pil(image_data)
        if pil_format:
            logger.debug("Format detected by PIL", format=pil_format, confident=True)
            return self._normalize_format_name(pil_format), True

        # Partial signature match only
        if format_name:
            logger.debug(
                "Format detected by partial signature",
                format=format_name,
                confident=False,
            )
            return self._normalize_format_name(format_name), False

        logger.warning("Failed to detect image format")
        raise InvalidImageError(
            "image: unknown format",
            details={"supported_formats": list(SUPPORTED_INPUT_FORMATS)},
        )

    def _detect_by_magic_bytes(self, data: bytes) -> Tuple[Optional[str], bool]:
        """
        Detect format using magic bytes.

        Returns:
            Tuple of (format_name, is_confident)
        """
        for signature, format_name in IMAGE_MAGIC_BYTES.items():
            if data.startswith(signature):
                if format_name == "WebP/RIFF":
                    if len(data) >= 12 and data[8:12] == b"WEBP":
                        return "webp", True
                    return "riff", False

                if format_name == "BMP":
                    # "BM" alone is too short to trust
                    return "bmp", len(data) >= 14

                return format_name.lower(), True

        return None, False

    def _detect_by_pil(self, data: bytes) -> Optional[str]:
        """Detect format using PIL."""
        try:
            with BytesIO(data) as buffer:
                with Image.open(buffer) as img:
                    if img.format:
                        pil_format = img.format.upper()
                        return self._pil_format_map.get(pil_format, pil_format.lower())
        except Exception as e:
            logger.debug("PIL detection failed", error=str(e))

        return None

    def _normalize_format_name(self, format_name: str) -> str:
        """
        Normalize format name to our standard naming.

        Args:
            format_name: Raw format name

        Returns:
            Normalized format name
        """
        format_lower = format_name.lower()
        return FORMAT_ALIASES.get(format_lower, format_lower)

    def is_format_supported(self, format_name: str) -> bool:
        """Check if a detected format can be decoded."""
        return self._normalize_format_name(format_name) in SUPPORTED_INPUT_FORMATS


format_detection_service = FormatDetectionService()
