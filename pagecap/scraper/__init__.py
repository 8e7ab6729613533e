"""Scraper package — page fetch & selector slicing."""

from pagecap.scraper.fetcher import get_page_html
from pagecap.scraper.models import Validation, ValidationCode
from pagecap.scraper.selector import apply_selector

__all__ = ["get_page_html", "apply_selector", "Validation", "ValidationCode"]
