"""Conversion manager for orchestrating image conversions."""

import os
from pathlib import Path
from typing import BinaryIO, Dict, Optional, Union

import structlog

from imgconvert.config import settings
from imgconvert.core.conversion.formats.base import BaseFormatHandler
from imgconvert.core.exceptions import (
    ConfigurationError,
    ConversionFailedError,
    FormatError,
    ImageConverterError,
    InputFileError,
    InvalidImageError,
    OutputFileError,
    UnsupportedFormatError,
)
from imgconvert.models.conversion import (
    ConversionErrorKind,
    ConversionResult,
    ConversionSettings,
    ConversionStatus,
    DecodedImage,
    OutputFormat,
)
from imgconvert.services.format_detection_service import (
    FormatDetectionService,
    format_detection_service,
)
from imgconvert.utils.logging import LoggingContext

logger = structlog.get_logger()

PathLike = Union[str, os.PathLike]


class ConversionManager:
    """Manages the image conversion pipeline."""

    def __init__(
        self,
        conversion_settings: Optional[ConversionSettings] = None,
        detection_service: Optional[FormatDetectionService] = None,
        remove_partial_output: Optional[bool] = None,
    ) -> None:
        """Initialize conversion manager."""
        self.conversion_settings = conversion_settings or ConversionSettings()
        self.detection_service = detection_service or format_detection_service
        self.remove_partial_output = (
            settings.remove_partial_output
            if remove_partial_output is None
            else remove_partial_output
        )
        self.format_handlers: Dict[OutputFormat, BaseFormatHandler] = {}

        self._initialize_handlers()

    def _initialize_handlers(self) -> None:
        """Initialize format handlers."""
        # Import handlers here to avoid circular imports
        from imgconvert.core.conversion.formats.bmp_handler import BmpHandler
        from imgconvert.core.conversion.formats.gif_handler import GifHandler
        from imgconvert.core.conversion.formats.jpeg_handler import JPEGHandler
        from imgconvert.core.conversion.formats.png_handler import PNGHandler
        from imgconvert.core.conversion.formats.tiff_handler import TiffHandler

        self.register_handler(OutputFormat.JPEG, JPEGHandler())
        self.register_handler(OutputFormat.PNG, PNGHandler())
        self.register_handler(OutputFormat.GIF, GifHandler())
        self.register_handler(OutputFormat.BMP, BmpHandler())
        self.register_handler(OutputFormat.TIFF, TiffHandler())

        self.check_registry()

    def register_handler(
        self, output_format: OutputFormat, handler: BaseFormatHandler
    ) -> None:
        """Register a format handler."""
        self.format_handlers[OutputFormat(output_format)] = handler

    def check_registry(self) -> None:
        """Ensure every output format has a handler."""
        missing = [fmt.value for fmt in OutputFormat if fmt not in self.format_handlers]
        if missing:
            raise ConfigurationError(
                f"No format handler registered for: {', '.join(missing)}",
                details={"missing": missing},
            )

    def get_handler(self, format_name: str) -> BaseFormatHandler:
        """Find the handler that decodes ``format_name``."""
        for handler in self.format_handlers.values():
            if handler.can_handle(format_name):
                return handler
        raise InvalidImageError(
            f"image: unsupported source format {format_name}",
            details={"detected_format": format_name},
        )

    def decode(self, image_data: bytes) -> DecodedImage:
        """Detect the format of ``image_data`` and decode it."""
        format_name, confident = self.detection_service.detect_format(image_data)
        if not self.detection_service.is_format_supported(format_name):
            raise InvalidImageError(
                f"image: unsupported source format {format_name}",
                details={"detected_format": format_name},
            )

        handler = self.get_handler(format_name)
        image = handler.load_image(image_data)
        logger.debug(
            "Image decoded",
            format=format_name,
            confident=confident,
            width=image.width,
            height=image.height,
            mode=image.mode,
        )
        return DecodedImage.from_image(image, format_name)

    def encode(
        self,
        decoded: DecodedImage,
        output_format: OutputFormat,
        output_buffer: BinaryIO,
    ) -> None:
        """Encode a decoded image into ``output_buffer``."""
        handler = self.format_handlers[OutputFormat(output_format)]
        handler.save_image(decoded.image, output_buffer, self.conversion_settings)

    def convert_file(
        self, input_path: PathLike, output_path: PathLike, format_token: str
    ) -> ConversionResult:
        """Convert one file into the format named by ``format_token``.

        Never raises for the named failure classes; the returned
        ``ConversionResult`` carries the error kind and message instead.
        """
        result = ConversionResult(requested_format=format_token)

        with LoggingContext(operation="convert", requested_format=format_token):
            try:
                image_data = self._read_input(input_path)

                decoded = self.decode(image_data)
                result.source_format = decoded.source_format
                result.width, result.height = decoded.dimensions

                output_format = OutputFormat.from_token(format_token)
                result.output_format = output_format

                result.output_size = self._write_output(
                    decoded, output_format, Path(output_path), result
                )

            except InputFileError as e:
                return self._fail(result, ConversionErrorKind.INPUT_OPEN, e)
            except (InvalidImageError, FormatError) as e:
                return self._fail(result, ConversionErrorKind.DECODE, e)
            except UnsupportedFormatError as e:
                return self._fail(result, ConversionErrorKind.UNSUPPORTED_FORMAT, e)
            except OutputFileError as e:
                return self._fail(result, ConversionErrorKind.OUTPUT_CREATE, e)
            except ConversionFailedError as e:
                return self._fail(result, ConversionErrorKind.ENCODE, e)

            result.status = ConversionStatus.COMPLETED
            logger.info(
                "Conversion completed",
                source_format=result.source_format,
                output_format=result.output_format,
                output_size=result.output_size,
            )
            return result

    def _read_input(self, input_path: PathLike) -> bytes:
        try:
            with open(input_path, "rb") as f:
                return f.read()
        except OSError as e:
            raise InputFileError(
                f"open {input_path}: {e.strerror or e}",
                details={"operation": "open", "errno": e.errno or 0},
            ) from e

    def _write_output(
        self,
        decoded: DecodedImage,
        output_format: OutputFormat,
        output_path: Path,
        result: ConversionResult,
    ) -> int:
        try:
            output_file = open(output_path, "wb")
        except OSError as e:
            raise OutputFileError(
                f"open {output_path}: {e.strerror or e}",
                details={"operation": "create", "errno": e.errno or 0},
            ) from e

        try:
            try:
                with output_file:
                    self.encode(decoded, output_format, output_file)
                    output_size = output_file.tell()
            except OSError as e:
                # Buffered writes can fail on flush or close
                raise ConversionFailedError(
                    f"write {output_path}: {e.strerror or e}",
                    details={"output_format": output_format.value, "error": str(e)},
                ) from e
        except ImageConverterError:
            if self.remove_partial_output:
                result.partial_output_removed = self._remove_partial(output_path)
            raise

        return output_size

    def _remove_partial(self, output_path: Path) -> bool:
        # Never unlink devices or other special files
        if not output_path.is_file():
            return False
        try:
            output_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Could not remove partial output", error=str(e))
            return False
        logger.debug("Removed partial output file")
        return True

    def _fail(
        self,
        result: ConversionResult,
        kind: ConversionErrorKind,
        error: ImageConverterError,
    ) -> ConversionResult:
        result.status = ConversionStatus.FAILED
        result.error_kind = kind
        result.error_message = error.message
        logger.warning(
            "Conversion failed",
            error_kind=kind.value,
            error_code=error.error_code,
        )
        return result
