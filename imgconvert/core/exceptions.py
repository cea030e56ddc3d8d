from typing import Dict, List, Optional, TypedDict, Union


class ConversionDetails(TypedDict, total=False):
    """Type-safe details for conversion errors."""

    input_format: str
    output_format: str
    dimensions: tuple[int, int]
    color_mode: str
    error: str


class FileDetails(TypedDict, total=False):
    """Type-safe details for file access errors."""

    operation: str
    errno: int
    reason: str


class FormatDetails(TypedDict, total=False):
    """Type-safe details for format errors."""

    format: str
    requested_format: str
    detected_format: str
    supported_formats: List[str]
    error: str


class ConfigDetails(TypedDict, total=False):
    """Type-safe details for configuration errors."""

    config_key: str
    missing: List[str]
    valid_options: List[str]


ErrorDetails = Union[
    ConversionDetails,
    FileDetails,
    FormatDetails,
    ConfigDetails,
    Dict[str, Union[str, int, float, bool, List[str]]],
]


class ImageConverterError(Exception):
    """Base exception for all Image Converter errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[ErrorDetails] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(ImageConverterError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, details: Optional[ConfigDetails] = None):
        super().__init__(message=message, error_code="CONV007", details=details)


class InvalidImageError(ImageConverterError):
    """Raised when image data is invalid or corrupted."""

    def __init__(self, message: str, details: Optional[FormatDetails] = None):
        super().__init__(message=message, error_code="CONV101", details=details)


class UnsupportedFormatError(ImageConverterError):
    """Raised when an image format is not supported."""

    def __init__(self, message: str, details: Optional[FormatDetails] = None):
        super().__init__(message=message, error_code="CONV102", details=details)


class ConversionFailedError(ImageConverterError):
    """Raised when encoding the converted image fails."""

    def __init__(self, message: str, details: Optional[ConversionDetails] = None):
        super().__init__(message=message, error_code="CONV103", details=details)


class InputFileError(ImageConverterError):
    """Raised when the input file cannot be opened or read."""

    def __init__(self, message: str, details: Optional[FileDetails] = None):
        super().__init__(message=message, error_code="CONV301", details=details)


class OutputFileError(ImageConverterError):
    """Raised when the output file cannot be created."""

    def __init__(self, message: str, details: Optional[FileDetails] = None):
        super().__init__(message=message, error_code="CONV302", details=details)


# Format-specific exceptions
class FormatError(ImageConverterError):
    """Base class for format-specific decoding errors."""

    pass


class JpegDecodingError(FormatError):
    """Raised when JPEG decoding fails."""

    def __init__(
        self,
        message: str = "Failed to decode JPEG image",
        details: Optional[FormatDetails] = None,
    ):
        super().__init__(message=message, error_code="CONV201", details=details)


class PngDecodingError(FormatError):
    """Raised when PNG decoding fails."""

    def __init__(
        self,
        message: str = "Failed to decode PNG image",
        details: Optional[FormatDetails] = None,
    ):
        super().__init__(message=message, error_code="CONV202", details=details)


class BmpDecodingError(FormatError):
    """Raised when BMP decoding fails."""

    def __init__(
        self,
        message: str = "Failed to decode BMP image",
        details: Optional[FormatDetails] = None,
    ):
        super().__init__(message=message, error_code="CONV203", details=details)


class TiffDecodingError(FormatError):
    """Raised when TIFF decoding fails."""

    def __init__(
        self,
        message: str = "Failed to decode TIFF image",
        details: Optional[FormatDetails] = None,
    ):
        super().__init__(message=message, error_code="CONV204", details=details)


class GifDecodingError(FormatError):
    """Raised when GIF decoding fails."""

    def __init__(
        self,
        message: str = "Failed to decode GIF image",
        details: Optional[FormatDetails] = None,
    ):
        super().__init__(message=message, error_code="CONV205", details=details)
