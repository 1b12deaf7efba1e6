"""
Indexer catalog tooling.

Parses indexer listings, recovers the category labels packed into their
undelimited category column, and keeps the results in a small SQLite catalog
that can be queried from the CLI or over HTTP.
"""

__version__ = "0.1.0"

__all__ = [
    "config",
    "logging",
    "paths",
]
