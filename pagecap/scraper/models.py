"""Data models for the fetch/slice stage."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ValidationCode(IntEnum):
    """Outcome of fetching (and optionally slicing) a page."""

    OK = 0
    TIMEOUT = 1
    UNREACHABLE = 2
    TOO_LARGE = 3
    SELECTOR_MISS = 4
    INTERNAL = 5


@dataclass
class Validation:
    """Success flag plus a :class:`ValidationCode`, carried between stages.

    ``SELECTOR_MISS`` is the only nonzero code that can accompany
    ``valid=True``: the page was fetched, but at least one requested element
    was absent so the slice is wider than asked for.

    A fresh record is only a placeholder; the flag and code are meaningful
    once :func:`~pagecap.scraper.fetcher.get_page_html` has returned it.
    """

    valid: bool = False
    code: ValidationCode = ValidationCode.OK

    @property
    def partial(self) -> bool:
        return self.valid and self.code == ValidationCode.SELECTOR_MISS
