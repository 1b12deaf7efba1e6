from __future__ import annotations

import sqlite3
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..domain.categories import DEFAULT_VOCABULARY, ORDER_BY_LENGTH
from ..domain.listing import parse_listing
from ..domain.models import IndexerRecord
from ..logging import get_logger
from .base_urls import INDEXER_BASE_URLS, get_base_urls
from .db import IndexerCatalog


LOG = get_logger("catalog-service")


@dataclass
class ImportSummary:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class CatalogImportService:
    """Parses indexer listings and stores the records in the catalog.

    Known base URLs are looked up by indexer name and attached to each record.
    Entries in `base_urls` extend or replace the bundled mapping.
    """

    def __init__(
        self,
        catalog: Optional[IndexerCatalog] = None,
        base_urls: Optional[Mapping[str, List[str]]] = None,
    ) -> None:
        self.catalog = catalog or IndexerCatalog()
        self.base_urls: Dict[str, List[str]] = {**INDEXER_BASE_URLS, **(base_urls or {})}

    def import_records(self, records: Iterable[IndexerRecord]) -> ImportSummary:
        """Create or update each record; failures are logged and counted as skipped."""
        summary = ImportSummary()
        for record in records:
            summary.total += 1
            try:
                created = self.catalog.upsert_indexer(record, get_base_urls(record.name, self.base_urls))
            except (ValueError, sqlite3.Error) as exc:
                summary.skipped += 1
                LOG.error(f"Error processing {record.name!r}: {exc}")
                continue
            if created:
                summary.created += 1
                LOG.info(f"Created: {record.name}")
            else:
                summary.updated += 1
                LOG.info(f"Updated: {record.name}")
        LOG.info(
            "Import finished: created=%d updated=%d skipped=%d total=%d",
            summary.created,
            summary.updated,
            summary.skipped,
            summary.total,
        )
        return summary

    def import_listing(
        self,
        text: str,
        vocabulary: Sequence[str] = DEFAULT_VOCABULARY,
        *,
        order: str = ORDER_BY_LENGTH,
        strict: bool = False,
    ) -> ImportSummary:
        records = parse_listing(text, vocabulary, order=order, strict=strict)
        return self.import_records(records)
