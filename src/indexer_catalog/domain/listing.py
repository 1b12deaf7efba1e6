from __future__ import annotations

import json
from typing import Iterable, List, Optional, Sequence

from ..logging import get_logger
from .categories import (
    DEFAULT_VOCABULARY,
    ORDER_BY_LENGTH,
    CategoryDecompositionError,
    extract_categories,
    extract_categories_strict,
)
from .models import IndexerRecord

LOG = get_logger("listing")

FIELD_SEPARATOR = "\t"
# protocol, name, language, description, privacy, categories
MIN_FIELDS = 6


class ListingFormatError(Exception):
    def __init__(self, message: str, line_no: Optional[int] = None) -> None:
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no


def parse_listing_line(
    line: str,
    vocabulary: Sequence[str] = DEFAULT_VOCABULARY,
    *,
    order: str = ORDER_BY_LENGTH,
    strict: bool = False,
    line_no: Optional[int] = None,
) -> Optional[IndexerRecord]:
    """Parse one tab-delimited listing row.

    Returns None for rows with too few fields unless ``strict`` is set, in
    which case short rows and category blobs with leftover text raise
    ListingFormatError.
    """
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) < MIN_FIELDS:
        if strict:
            raise ListingFormatError(
                f"expected at least {MIN_FIELDS} tab-separated fields, got {len(parts)}", line_no
            )
        return None

    protocol, name, language, description, privacy = (p.strip() for p in parts[:5])
    # Category blob is the sixth column; anything after it is ignored.
    blob = parts[5].strip()
    if strict:
        try:
            categories = extract_categories_strict(blob, vocabulary, order=order)
        except CategoryDecompositionError as exc:
            raise ListingFormatError(f"{name}: {exc}", line_no) from exc
    else:
        categories = extract_categories(blob, vocabulary, order=order)

    return IndexerRecord(
        name=name,
        protocol=protocol,
        language=language,
        description=description,
        privacy=privacy,
        categories=categories,
    )


def parse_listing(
    text: str,
    vocabulary: Sequence[str] = DEFAULT_VOCABULARY,
    *,
    order: str = ORDER_BY_LENGTH,
    strict: bool = False,
) -> List[IndexerRecord]:
    records: List[IndexerRecord] = []
    skipped = 0
    for line_no, line in enumerate((text or "").strip().split("\n"), start=1):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        record = parse_listing_line(line, vocabulary, order=order, strict=strict, line_no=line_no)
        if record is None:
            skipped += 1
            LOG.warning(f"Skipping line {line_no}: fewer than {MIN_FIELDS} fields")
            continue
        records.append(record)
    LOG.info(f"Parsed {len(records)} indexer record(s), skipped {skipped}")
    return records


def records_to_json(records: Iterable[IndexerRecord], indent: Optional[int] = 2) -> str:
    return json.dumps([r.to_dict() for r in records], indent=indent, ensure_ascii=False)
