"""
Application-wide constants for the image converter.
Centralizes format signatures, aliases and exit codes.
"""

# Magic bytes, checked in order. Signatures for formats we cannot decode are
# kept so detection can name them in the error message.
IMAGE_MAGIC_BYTES = {
    b"\xff\xd8\xff": "JPEG",
    b"\x89PNG\r\n\x1a\n": "PNG",
    b"GIF87a": "GIF",
    b"GIF89a": "GIF",
    b"II*\x00": "TIFF",
    b"MM\x00*": "TIFF",
    b"BM": "BMP",
    b"RIFF": "WebP/RIFF",  # needs a WEBP check at offset 8
    b"\x00\x00\x00\x0c\x6a\x50\x20\x20": "JPEG2000",
    b"\xff\x0a": "JPEG_XL",
    b"\x00\x00\x01\x00": "ICO",
}

# Minimum bytes needed before detection is attempted
MIN_DETECTION_BYTES = 2

# Format name aliases (alias -> canonical)
FORMAT_ALIASES = {
    "jpg": "jpeg",
    "jpe": "jpeg",
    "jfif": "jpeg",
    "tif": "tiff",
    "dib": "bmp",
    "jpeg2000": "jp2",
    "jpeg_xl": "jxl",
}

# Aliases accepted on the command line for the output format
OUTPUT_FORMAT_ALIASES = {
    "jpg": "jpeg",
}

# Formats the converter can decode
SUPPORTED_INPUT_FORMATS = ("jpeg", "png", "gif", "bmp", "tiff")

# Encoder defaults
DEFAULT_JPEG_QUALITY = 75
DEFAULT_GIF_COLORS = 256
DEFAULT_TIFF_COMPRESSION = "raw"

# Background used when flattening alpha for formats without transparency
FLATTEN_BACKGROUND_COLOR = (255, 255, 255)

# Alpha threshold below which a pixel becomes the GIF transparent index
GIF_ALPHA_THRESHOLD = 128

# CLI
CLI_PROG_NAME = "imgconvert"
CLI_USAGE = f"Usage: {CLI_PROG_NAME} <input file> <output file> <format>"
CLI_EXPECTED_ARGS = 3

# Process exit codes, one per failure class
EXIT_SUCCESS = 0
EXIT_USAGE = 2
EXIT_INPUT_OPEN = 3
EXIT_DECODE = 4
EXIT_OUTPUT_CREATE = 5
EXIT_UNSUPPORTED_FORMAT = 6
EXIT_ENCODE = 7

# Logging
DEFAULT_LOG_DIR = "./logs"
DEFAULT_MAX_LOG_SIZE_MB = 10
DEFAULT_LOG_BACKUP_COUNT = 3
