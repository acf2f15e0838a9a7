"""
Cover image lookup against the Open Library books API.

A lookup is a single GET with a bounded timeout. Failures never reach the
caller: they are logged and reported as "no cover", and pages fall back to
PLACEHOLDER_COVER.
"""

import logging
from typing import Optional
import requests
from booktracker.core.config import settings
from booktracker.core.exceptions import ExternalLookupFailure

logger = logging.getLogger(__name__)

# Inline SVG so the placeholder needs no static file
PLACEHOLDER_COVER = (
    "data:image/svg+xml,<svg xmlns='http://www.w3.org/2000/svg' width='320' height='480' "
    "viewBox='0 0 320 480'><rect width='320' height='480' fill='%23111827'/>"
    "<text x='50%' y='50%' fill='%2394a3b8' font-size='20' text-anchor='middle' "
    "font-family='Arial'>No cover</text></svg>"
)


class CoverService:
    def __init__(self, api_url: str, timeout: float):
        self.api_url = api_url
        self.timeout = timeout

    def fetch_cover_url(self, isbn: Optional[str]) -> Optional[str]:
        """Return a cover URL for the ISBN, or None (no call is made for an empty ISBN)"""
        if not isbn:
            return None
        try:
            return self._lookup(isbn)
        except ExternalLookupFailure as exc:
            logger.warning("Cover lookup failed for ISBN %s: %s", isbn, exc.message)
            return None

    def cover_or_placeholder(self, isbn: Optional[str]) -> str:
        return self.fetch_cover_url(isbn) or PLACEHOLDER_COVER

    def _lookup(self, isbn: str) -> Optional[str]:
        bibkey = f"ISBN:{isbn}"
        try:
            response = requests.get(
                self.api_url,
                params={"bibkeys": bibkey, "format": "json", "jscmd": "data"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise ExternalLookupFailure(str(exc)) from exc

        if not isinstance(data, dict):
            raise ExternalLookupFailure("Unexpected response body")

        entry = data.get(bibkey)
        if not isinstance(entry, dict):
            return None
        cover = entry.get("cover")
        if not isinstance(cover, dict):
            return None
        # Medium is the size the list page is laid out for
        for size in ("medium", "large"):
            url = cover.get(size)
            if isinstance(url, str) and url:
                return url
        return None


cover_service = CoverService(settings.OPEN_LIBRARY_API, settings.COVER_LOOKUP_TIMEOUT)
