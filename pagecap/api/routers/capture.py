"""Capture endpoint — render a remote page to PNG.

Routes
------
GET /capture?url=<page>&dynamic_size_selector=<tag names>

Status codes
------------
200  PNG of the page (or of the selected fragment)
206  PNG produced, but a selector element was missing so the image shows a
     wider slice than requested
400  HTML (after slicing) exceeds the size cap
500  rendering, decoding or file I/O failed
502  ``url`` missing or the query string could not be parsed
503  the page could not be contacted
504  the page did not respond in time
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from fastapi import APIRouter, Request, Response

from pagecap.render import ConversionError, Converter, ImageDecodeError, reencode_png
from pagecap.scraper import ValidationCode, get_page_html

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR_MESSAGE = "Internal server error"

_FAILURES: dict[ValidationCode, tuple[int, str]] = {
    ValidationCode.TIMEOUT: (504, "Capture site did not load in time"),
    ValidationCode.UNREACHABLE: (503, "Capture site could not be contacted"),
    ValidationCode.TOO_LARGE: (400, "Request is too large"),
    ValidationCode.INTERNAL: (500, INTERNAL_ERROR_MESSAGE),
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def failure_response(code: ValidationCode) -> tuple[int, str]:
    """Return ``(status, message)`` for an invalid validation *code*."""
    return _FAILURES.get(code, (500, INTERNAL_ERROR_MESSAGE))


def _text(status_code: int, message: str) -> Response:
    # An explicit header keeps Starlette from appending a charset.
    return Response(
        content=message,
        status_code=status_code,
        headers={"Content-Type": "text/plain"},
    )


def _query_param(query: dict[str, list[str]], name: str) -> str:
    values = query.get(name)
    return values[0] if values else ""


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.get("")
def capture(request: Request) -> Response:
    """Fetch ``url``, slice it by ``dynamic_size_selector`` and return a PNG."""
    try:
        query = parse_qs(request.url.query, keep_blank_values=True, errors="strict")
    except (UnicodeDecodeError, ValueError):
        return _text(502, "Capture page not found.")

    url = _query_param(query, "url")
    if not url:
        return _text(502, "Capture page not found in querystring.")
    selector = _query_param(query, "dynamic_size_selector")

    html, validation = get_page_html(url, selector)
    if not validation.valid:
        status_code, message = failure_response(validation.code)
        logger.info("[CAPTURE] %s rejected with %d (%s).", url, status_code, validation.code.name)
        return _text(status_code, message)

    with Converter(html) as converter:
        try:
            converter.convert()
        except (ConversionError, OSError) as exc:
            logger.error("[CAPTURE] Error converting %s to png: %s", url, exc)
            return _text(500, INTERNAL_ERROR_MESSAGE)

        try:
            fp = converter.output_path.open("rb")
        except OSError as exc:
            logger.error("[CAPTURE] Error reading temp png file %s: %s", converter.output_path, exc)
            return _text(500, INTERNAL_ERROR_MESSAGE)

        with fp:
            try:
                body = reencode_png(fp)
            except ImageDecodeError as exc:
                logger.error("[CAPTURE] Error decoding %s: %s", converter.output_path, exc)
                return _text(500, INTERNAL_ERROR_MESSAGE)

    status_code = 206 if validation.code == ValidationCode.SELECTOR_MISS else 200
    logger.info("[CAPTURE] Finished job %s: %d, %d bytes.", converter.id, status_code, len(body))
    return Response(
        content=body,
        status_code=status_code,
        media_type="image/png",
    )
