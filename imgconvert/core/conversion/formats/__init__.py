"""Format handlers, one per codec."""

from .base import BaseFormatHandler
from .bmp_handler import BmpHandler
from .gif_handler import GifHandler
from .jpeg_handler import JPEGHandler
from .png_handler import PNGHandler
from .tiff_handler import TiffHandler

__all__ = [
    "BaseFormatHandler",
    "BmpHandler",
    "GifHandler",
    "JPEGHandler",
    "PNGHandler",
    "TiffHandler",
]
