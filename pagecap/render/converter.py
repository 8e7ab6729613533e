"""HTML → PNG conversion through the external ``wkhtmltoimage`` binary.

The binary only works from files, so every conversion owns a pair of temp
files under ``settings.tmp_dir``::

    input<ID>.html    the HTML payload
    output<ID>.png    the rendered image

``<ID>`` is a random 8-digit number, redrawn until neither path exists.
Use a :class:`Converter` as a context manager so both files are removed on
every exit path::

    with Converter(html) as converter:
        converter.convert()
        data = converter.output_path.read_bytes()
"""

from __future__ import annotations

import logging
import secrets
import subprocess
from pathlib import Path
from typing import Optional

from pagecap.config import settings

logger = logging.getLogger(__name__)

_ID_MIN = 10_000_000
_ID_MAX = 99_999_999


class ConversionError(RuntimeError):
    """The rendering binary could not be run or exited unsuccessfully."""

    def __init__(self, message: str, returncode: Optional[int] = None) -> None:
        super().__init__(message)
        self.returncode = returncode


def _paths(tmp_dir: Path, unique_id: str) -> tuple[Path, Path]:
    return tmp_dir / f"input{unique_id}.html", tmp_dir / f"output{unique_id}.png"


def generate_unique_id(tmp_dir: Path) -> str:
    """Return an 8-digit ID whose input and output paths are both unused.

    Drawn from :mod:`secrets` so rapid successive calls (including from
    concurrent requests) do not repeat.
    """
    while True:
        unique_id = str(secrets.randbelow(_ID_MAX - _ID_MIN + 1) + _ID_MIN)
        in_path, out_path = _paths(tmp_dir, unique_id)
        if in_path.exists() or out_path.exists():
            logger.debug("[CONVERT] ID %s already in use, redrawing.", unique_id)
            continue
        return unique_id


class Converter:
    """A single HTML payload and the temp files used to render it."""

    def __init__(self, html: bytes, tmp_dir: Optional[Path] = None) -> None:
        self.html = html
        self.tmp_dir = Path(tmp_dir) if tmp_dir is not None else settings.tmp_dir
        self.id = generate_unique_id(self.tmp_dir)
        self.input_path, self.output_path = _paths(self.tmp_dir, self.id)
        logger.info("[CONVERT] Allocated converter %s.", self.id)

    def __repr__(self) -> str:
        return f"Converter(id={self.id!r}, bytes={len(self.html)})"

    def __enter__(self) -> "Converter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    @property
    def command(self) -> list[str]:
        return [
            settings.convert_command,
            "--format", "png",
            str(self.input_path),
            str(self.output_path),
        ]

    def convert(self) -> None:
        """Write the HTML to disk and render it to :attr:`output_path`.

        Raises:
            OSError: The input file could not be written.
            ConversionError: The binary is missing, timed out, or exited
                with a nonzero status.  The output file may or may not exist.
        """
        self.input_path.write_bytes(self.html)
        self.input_path.chmod(0o644)

        logger.info("[CONVERT] Running %s", self.command)
        try:
            result = subprocess.run(
                self.command,
                capture_output=True,
                timeout=settings.convert_timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            logger.error("[CONVERT] %s not found on PATH.", settings.convert_command)
            raise ConversionError(f"{settings.convert_command} not found") from exc
        except subprocess.TimeoutExpired as exc:
            logger.error(
                "[CONVERT] %s exceeded %.1fs deadline for %s.",
                settings.convert_command,
                settings.convert_timeout,
                self.id,
            )
            raise ConversionError(
                f"{settings.convert_command} timed out after {settings.convert_timeout}s"
            ) from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            logger.error(
                "[CONVERT] %s exited with %d for %s: %s",
                settings.convert_command,
                result.returncode,
                self.id,
                stderr,
            )
            raise ConversionError(
                f"{settings.convert_command} exited with status {result.returncode}",
                returncode=result.returncode,
            )
        logger.info("[CONVERT] Conversion complete for %s.", self.id)

    def cleanup(self) -> None:
        """Remove both temp files if present.  Never raises; safe to repeat."""
        for path in (self.input_path, self.output_path):
            try:
                if path.exists():
                    path.unlink()
            except OSError as exc:
                logger.warning("[CLEANUP] Error removing temp file %s: %s", path, exc)


def convert_image(html: bytes, tmp_dir: Optional[Path] = None) -> Converter:
    """Render *html* and return the populated :class:`Converter`.

    The caller owns the returned converter and must call
    :meth:`Converter.cleanup`.  If conversion fails the temp files are
    removed here before the exception propagates.
    """
    converter = Converter(html, tmp_dir=tmp_dir)
    try:
        converter.convert()
    except Exception:
        converter.cleanup()
        raise
    return converter
