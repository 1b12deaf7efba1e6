"""Known base URLs per indexer name, attached to catalog entries on import."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional


INDEXER_BASE_URLS: Dict[str, List[str]] = {
    "The Pirate Bay": [
        "https://thepiratebay.org/",
        "https://thepiratebay10.xyz/",
        "https://thepiratebay.zone/",
        "https://tpb.party/",
        "https://piratebay.live/",
        "https://thepiratebay.cloud/",
    ],
    "1337x": [
        "https://1337x.to/",
        "https://1337x.st/",
        "https://www.1377x.to/",
        "https://x1337x.ws/",
        "https://x1337x.eu/",
        "https://x1337x.se/",
    ],
    "BitSearch": ["https://bitsearch.to/"],
    "LimeTorrents": [
        "https://www.limetorrents.lol/",
        "https://www.limetorrents.info/",
    ],
    "abNZB": ["https://abnzb.com/"],
    "NZBgeek": [
        "https://api.nzbgeek.info/",
        "https://nzbgeek.info/",
    ],
    "0day.kiev": ["https://0day.kiev.ua/"],
    "0Magnet": ["https://0magnet.com/"],
}


def get_base_urls(name: str, mapping: Optional[Mapping[str, List[str]]] = None) -> List[str]:
    """Return the base URLs known for an indexer, or an empty list."""
    source = INDEXER_BASE_URLS if mapping is None else mapping
    return list(source.get(name) or [])
