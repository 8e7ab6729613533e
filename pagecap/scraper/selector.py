"""Tag-name selector slicing.

A selector expression is a whitespace-separated list of element names such
as ``"body div table"``.  Each name narrows the current HTML slice to the
span running from the first ``<name`` up to and including the first
``</name>``; later names operate on the slice produced by earlier ones.

The match is purely textual and has two known limitations:

* ``<name`` is a prefix match, so ``p`` also matches ``<pre``.
* The closing tag is searched from the start of the current slice, not from
  the opening tag.  When the first ``</name`` comes before the first
  ``<name`` the step is treated as a miss.
"""

from __future__ import annotations

import logging

from pagecap.scraper.models import Validation, ValidationCode

logger = logging.getLogger(__name__)


def apply_selector(html: bytes, selector: str, validation: Validation) -> bytes:
    """Narrow *html* by each element name in *selector*, in order.

    On the first name that cannot be located, ``validation.code`` is set to
    :attr:`ValidationCode.SELECTOR_MISS` and the slice obtained so far (the
    original *html* if the first name missed) is returned unchanged.
    """
    for name in selector.split():
        tag = name.encode("utf-8")

        start = html.find(b"<" + tag)
        if start == -1:
            logger.info("[SELECT] Opening tag <%s not found; keeping current slice.", name)
            validation.code = ValidationCode.SELECTOR_MISS
            break

        close = html.find(b"</" + tag)
        if close == -1:
            logger.info("[SELECT] Closing tag </%s not found; keeping current slice.", name)
            validation.code = ValidationCode.SELECTOR_MISS
            break

        # Through the ">" of "</name>"
        end = close + 3 + len(tag)
        if end <= start:
            logger.info("[SELECT] </%s precedes <%s; keeping current slice.", name, name)
            validation.code = ValidationCode.SELECTOR_MISS
            break

        html = html[start:end]

    return html
