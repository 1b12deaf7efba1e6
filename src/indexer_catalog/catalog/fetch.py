from __future__ import annotations

import requests

from ..logging import get_logger


LOG = get_logger("catalog-fetch")

DEFAULT_TIMEOUT = 30


class ListingFetchError(Exception):
    pass


def fetch_listing(url: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    """Download a tab-delimited indexer listing and return its text."""
    if not url:
        raise ListingFetchError("No listing URL given")
    LOG.info(f"Fetching indexer listing from {url}")
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise ListingFetchError(f"Request to {url} failed: {exc}") from exc
    if not (200 <= resp.status_code < 300):
        raise ListingFetchError(f"Listing fetch returned HTTP {resp.status_code}: {resp.text[:200]}")
    LOG.debug(f"Fetched {len(resp.text)} characters")
    return resp.text
