"""HTTP fetcher that classifies transport failures instead of raising."""

from __future__ import annotations

import logging

import httpx

from pagecap.config import settings
from pagecap.scraper.models import Validation, ValidationCode
from pagecap.scraper.selector import apply_selector

logger = logging.getLogger(__name__)


def _client() -> httpx.Client:
    return httpx.Client(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.request_timeout,
        follow_redirects=True,
    )


def get_page_html(url: str, selector: str = "") -> tuple[bytes, Validation]:
    """Fetch *url*, optionally narrow it with *selector*, and validate its size.

    The response status is deliberately ignored: error pages are read and
    rendered like any other page.

    Returns:
        ``(html, validation)``.  When ``validation.valid`` is ``False`` the
        code says why: ``TIMEOUT`` or ``UNREACHABLE`` (with empty *html*) for
        transport failures, ``INTERNAL`` when the body could not be read, and
        ``TOO_LARGE`` (with the oversized slice) past the size cap.
    """
    validation = Validation()

    try:
        with _client() as client, client.stream("GET", url) as response:
            try:
                html = response.read()
            except httpx.HTTPError as exc:
                logger.warning("[FETCH] Error reading body from %s: %s", url, exc)
                validation.code = ValidationCode.INTERNAL
                return b"", validation
    except httpx.TimeoutException as exc:
        logger.warning("[FETCH] Timed out contacting %s: %s", url, exc)
        validation.code = ValidationCode.TIMEOUT
        return b"", validation
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as exc:
        # UnicodeError: host labels the idna codec rejects (e.g. over 63 chars)
        logger.warning("[FETCH] Could not contact %s: %s", url, exc)
        validation.code = ValidationCode.UNREACHABLE
        return b"", validation

    logger.debug("[FETCH] %s -> HTTP %d, %d bytes", url, response.status_code, len(html))

    if selector:
        html = apply_selector(html, selector, validation)

    if len(html) > settings.max_html_bytes:
        logger.info(
            "[FETCH] HTML selection too large for conversion: %d > %d bytes.",
            len(html),
            settings.max_html_bytes,
        )
        validation.code = ValidationCode.TOO_LARGE
        return html, validation

    validation.valid = True
    if validation.code != ValidationCode.SELECTOR_MISS:
        validation.code = ValidationCode.OK
    return html, validation
