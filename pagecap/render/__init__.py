"""Render package — HTML-to-PNG conversion and PNG re-encoding."""

from pagecap.render.converter import ConversionError, Converter, convert_image
from pagecap.render.png import ImageDecodeError, reencode_png

__all__ = [
    "Converter",
    "ConversionError",
    "convert_image",
    "ImageDecodeError",
    "reencode_png",
]
