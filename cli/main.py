"""pagecap CLI — entry-point for serving and one-off captures.

Usage:
    python cli/main.py --help

Commands:
    serve     → run the HTTP capture service
    capture   → render a URL to a local PNG file
    slice     → apply a selector expression to a local HTML file
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from pagecap.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
from typing import Optional

import typer

from pagecap.config import settings
from pagecap.scraper import Validation, ValidationCode, apply_selector, get_page_html

app = typer.Typer(
    name="pagecap",
    help="Render web pages to PNG.",
    no_args_is_help=True,
)


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: settings.host)."),
    port: Optional[int] = typer.Option(None, help="Bind port (default: settings.port)."),
    reload: bool = typer.Option(False, help="Reload on code changes (development)."),
) -> None:
    """Run the /capture HTTP service with uvicorn."""
    import uvicorn

    _configure_logging()
    if not settings.tmp_dir_ready():
        typer.echo(f"[serve] Warning: temp directory {settings.tmp_dir} does not exist.", err=True)

    uvicorn.run(
        "pagecap.api.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# One-off capture
# ---------------------------------------------------------------------------
@app.command("capture")
def capture(
    url: str = typer.Argument(..., help="Page to capture."),
    selector: str = typer.Option("", "--selector", "-s", help="Tag names to narrow to, e.g. 'body div'."),
    output: Path = typer.Option(Path("capture.png"), "--output", "-o", help="Where to write the PNG."),
) -> None:
    """Fetch URL, optionally slice it, and render it to a PNG file."""
    from pagecap.api.routers.capture import failure_response
    from pagecap.render import ConversionError, ImageDecodeError, convert_image, reencode_png

    _configure_logging()
    typer.echo(f"[capture] Fetching {url!r} …")
    html, validation = get_page_html(url, selector)
    if not validation.valid:
        _, message = failure_response(validation.code)
        typer.echo(f"[capture] {message}", err=True)
        raise typer.Exit(1)

    if validation.partial:
        typer.echo(f"[capture] Selector {selector!r} not fully matched; rendering wider slice.")

    try:
        converter = convert_image(html)
    except (ConversionError, OSError) as exc:
        typer.echo(f"[capture] Conversion failed: {exc}", err=True)
        raise typer.Exit(1)

    with converter:
        try:
            with converter.output_path.open("rb") as fp:
                data = reencode_png(fp)
        except (ImageDecodeError, OSError) as exc:
            typer.echo(f"[capture] Conversion failed: {exc}", err=True)
            raise typer.Exit(1)

    output.write_bytes(data)
    typer.echo(f"[capture] Wrote {len(data)} bytes to {output}")


# ---------------------------------------------------------------------------
# Selector debugging
# ---------------------------------------------------------------------------
@app.command("slice")
def slice_html(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local HTML file."),
    selector: str = typer.Argument(..., help="Whitespace-separated tag names."),
) -> None:
    """Print the part of an HTML file a selector expression would keep."""
    validation = Validation()
    html = apply_selector(path.read_bytes(), selector, validation)
    if validation.code == ValidationCode.SELECTOR_MISS:
        typer.echo(f"[slice] Selector {selector!r} not fully matched.", err=True)
    typer.echo(html.decode("utf-8", errors="replace"))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
