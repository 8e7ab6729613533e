"""PNG validation and re-encoding with Pillow."""

from __future__ import annotations

import io
from typing import BinaryIO

from PIL import Image


class ImageDecodeError(ValueError):
    """The rendered output is not a decodable PNG."""


def reencode_png(fp: BinaryIO) -> bytes:
    """Decode the PNG in *fp* and return it re-encoded as PNG bytes.

    Decoding proves the rendering binary produced a well-formed image; the
    re-encoded buffer is what gets written to the response.
    """
    try:
        with Image.open(fp, formats=["PNG"]) as image:
            image.load()
            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"not a valid PNG: {exc}") from exc
    return buffer.getvalue()
