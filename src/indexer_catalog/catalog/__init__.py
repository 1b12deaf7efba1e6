"""Indexer catalog package.

Modules:
- base_urls: known base URLs per indexer
- db: SQLite location, schema and query helpers
- service: listing import into the catalog
- fetch: remote listing download
- sample: bundled sample listing
- frontend: read-only HTTP API
"""

from .db import IndexerCatalog
from .service import CatalogImportService, ImportSummary
from .frontend.app import create_app

__all__ = [
    "IndexerCatalog",
    "CatalogImportService",
    "ImportSummary",
    "create_app",
]
