from __future__ import annotations

from typing import Tuple

PROTOCOL_TORRENT = "torrent"
PROTOCOL_NZB = "nzb"
PROTOCOL_CHOICES: Tuple[str, ...] = (PROTOCOL_TORRENT, PROTOCOL_NZB)
PROTOCOL_DEFAULT = PROTOCOL_TORRENT

PRIVACY_PRIVATE = "Private"
PRIVACY_PUBLIC = "Public"
PRIVACY_SEMI_PRIVATE = "Semi-Private"
PRIVACY_CHOICES: Tuple[str, ...] = (PRIVACY_PRIVATE, PRIVACY_PUBLIC, PRIVACY_SEMI_PRIVATE)
PRIVACY_DEFAULT = PRIVACY_PUBLIC

LANGUAGE_DEFAULT = "en-US"

# Indexer type and implementation recorded for catalog entries.
INDEXER_TYPE_DEFAULT = "Cardigann"
IMPLEMENTATION_DEFAULT = "Cardigann"

# Paging bounds shared by the CLI and the HTTP API.
LIST_LIMIT_DEFAULT = 100
LIST_LIMIT_MIN = 1
LIST_LIMIT_MAX = 500
LIST_OFFSET_MAX = 1_000_000
