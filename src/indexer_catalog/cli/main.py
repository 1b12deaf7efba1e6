from __future__ import annotations

import argparse
import json
import os
import sqlite3
import sys
from typing import Optional, Sequence

from ..catalog import CatalogImportService, IndexerCatalog
from ..catalog.fetch import ListingFetchError, fetch_listing
from ..catalog.sample import SAMPLE_LISTING
from ..config import load_base_urls, load_category_order, load_db_path, load_listing_url, load_vocabulary
from ..domain.categories import ORDER_CHOICES, CategoryDecompositionError, extract_categories, extract_categories_strict
from ..domain.listing import ListingFormatError, parse_listing, records_to_json
from ..logging import get_logger
from ..paths import expand_abs

LOG = get_logger("cli-main")


def _read_input(path: Optional[str], *, sample: bool = False) -> str:
    if sample:
        LOG.info("Using bundled sample listing")
        return SAMPLE_LISTING
    if path and path != "-":
        with open(expand_abs(path), "r", encoding="utf-8") as f:
            return f.read()
    LOG.info("Reading listing from stdin")
    return sys.stdin.read()


def _open_catalog(ns: argparse.Namespace, script_dir: str) -> IndexerCatalog:
    db_path = ns.db or load_db_path(script_dir)
    return IndexerCatalog(root_dir=script_dir, db_path=expand_abs(db_path) if db_path else None)


def _add_order_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--order",
        choices=list(ORDER_CHOICES),
        help="Category output order: 'length' (match order, default) or 'position' (as in the blob)",
    )
    p.add_argument("--strict", action="store_true", help="Reject category blobs with unmatched text")


def _handle_parse(ns: argparse.Namespace) -> int:
    script_dir = os.getcwd()
    vocabulary = load_vocabulary(script_dir)
    order = ns.order or load_category_order(script_dir)
    text = _read_input(ns.input, sample=ns.sample)
    records = parse_listing(text, vocabulary, order=order, strict=ns.strict)
    print(records_to_json(records))
    return 0


def _handle_categories(ns: argparse.Namespace) -> int:
    script_dir = os.getcwd()
    vocabulary = load_vocabulary(script_dir)
    order = ns.order or load_category_order(script_dir)
    if ns.strict:
        found = extract_categories_strict(ns.blob, vocabulary, order=order)
    else:
        found = extract_categories(ns.blob, vocabulary, order=order)
    print(json.dumps(found))
    return 0


def _handle_import(ns: argparse.Namespace) -> int:
    script_dir = os.getcwd()
    vocabulary = load_vocabulary(script_dir)
    order = ns.order or load_category_order(script_dir)
    if ns.url is not None:
        url = ns.url or load_listing_url(script_dir)
        if not url:
            LOG.error("No listing URL. Pass --url URL or set INDEXER_LISTING_URL.")
            return 2
        text = fetch_listing(url, timeout=ns.timeout)
    else:
        text = _read_input(ns.input, sample=ns.sample)

    service = CatalogImportService(_open_catalog(ns, script_dir), load_base_urls(script_dir))
    summary = service.import_listing(text, vocabulary, order=order, strict=ns.strict)
    out = summary.to_dict()
    out["db_path"] = service.catalog.db_path
    print(json.dumps(out))
    return 0


def _handle_list(ns: argparse.Namespace) -> int:
    catalog = _open_catalog(ns, os.getcwd())
    payload = catalog.list_indexers(category=ns.category, protocol=ns.protocol, limit=ns.limit, offset=ns.offset)
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def _handle_serve(ns: argparse.Namespace) -> int:
    from ..catalog.frontend.app import create_app
    import uvicorn

    script_dir = os.getcwd()
    db_path = ns.db or load_db_path(script_dir)
    app = create_app(
        root_dir=script_dir,
        db_path=expand_abs(db_path) if db_path else None,
        allow_origins=ns.allow_origins,
    )
    uvicorn.run(app, host=ns.host, port=ns.port, log_level=ns.log_level)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="indexer-catalog",
        description="Parse indexer listings, extract their categories and manage the indexer catalog.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a tab-delimited listing and print JSON records.")
    src = parse_cmd.add_mutually_exclusive_group()
    src.add_argument("--input", help="Listing file ('-' or omitted reads stdin)")
    src.add_argument("--sample", action="store_true", help="Use the bundled sample listing")
    _add_order_args(parse_cmd)
    parse_cmd.set_defaults(handler=_handle_parse)

    cat_cmd = subparsers.add_parser("categories", help="Extract category labels from a single blob.")
    cat_cmd.add_argument("blob", help="Undelimited category string, e.g. MoviesTVXXX")
    _add_order_args(cat_cmd)
    cat_cmd.set_defaults(handler=_handle_categories)

    imp = subparsers.add_parser("import", help="Import a listing into the catalog (create or update by name).")
    isrc = imp.add_mutually_exclusive_group()
    isrc.add_argument("--input", help="Listing file ('-' or omitted reads stdin)")
    isrc.add_argument("--sample", action="store_true", help="Use the bundled sample listing")
    isrc.add_argument(
        "--url",
        nargs="?",
        const="",
        help="Fetch the listing over HTTP (defaults to INDEXER_LISTING_URL when no value is given)",
    )
    imp.add_argument("--timeout", type=int, default=30, help="HTTP timeout in seconds for --url")
    imp.add_argument("--db", help="Catalog database path (default: var/catalog/indexers.sqlite3)")
    _add_order_args(imp)
    imp.set_defaults(handler=_handle_import)

    lst = subparsers.add_parser("list", help="List catalog entries as JSON.")
    lst.add_argument("--db", help="Catalog database path")
    lst.add_argument("--category", help="Only indexers carrying this category")
    lst.add_argument("--protocol", help="Only indexers of this protocol (torrent|nzb)")
    lst.add_argument("--limit", type=int, default=100)
    lst.add_argument("--offset", type=int, default=0)
    lst.set_defaults(handler=_handle_list)

    serve = subparsers.add_parser("serve", help="Serve the catalog as a read-only JSON API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8002)
    serve.add_argument("--db", help="Catalog database path")
    serve.add_argument("--log-level", default="info")
    serve.add_argument(
        "--allow-origin",
        action="append",
        dest="allow_origins",
        help="Allowed CORS origin (can be provided multiple times, use '*' for any).",
    )
    serve.set_defaults(handler=_handle_serve)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    provided = list(argv) if argv is not None else sys.argv[1:]
    LOG.debug(f"CLI invoked with arguments: {provided}")

    parser = build_parser()
    args = parser.parse_args(provided)
    try:
        code = args.handler(args)
    except (CategoryDecompositionError, ListingFormatError) as exc:
        LOG.error(f"Invalid listing data: {exc}")
        code = 1
    except ListingFetchError as exc:
        LOG.error(str(exc))
        code = 1
    except sqlite3.Error as exc:
        LOG.error(f"{args.command} failed: catalog database error: {exc}")
        code = 1
    except (OSError, ValueError) as exc:
        LOG.error(f"{args.command} failed: {exc}")
        code = 2
    LOG.debug(f"Subcommand '{args.command}' finished with exit code {code}.")
    return code


if __name__ == "__main__":
    sys.exit(main())
