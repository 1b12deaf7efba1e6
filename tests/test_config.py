import json
import logging
import os
import sys

import pytest

# Ensure the repository's src/ is importable
sys.path.insert(0, os.path.abspath("src"))

from indexer_catalog.config import (
    load_base_urls,
    load_category_order,
    load_db_path,
    load_listing_url,
    load_vocabulary,
)
from indexer_catalog.domain.categories import DEFAULT_VOCABULARY


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("INDEXER_CATEGORIES", "CATEGORY_ORDER", "INDEXER_LISTING_URL", "INDEXER_DB_PATH"):
        monkeypatch.delenv(key, raising=False)


def test_default_vocabulary(tmp_path):
    assert load_vocabulary(str(tmp_path)) == DEFAULT_VOCABULARY
    assert load_category_order(str(tmp_path)) == "length"


def test_vocabulary_from_env_wins(tmp_path, monkeypatch):
    (tmp_path / "categories.json").write_text(json.dumps(["Ignored"]), encoding="utf-8")
    monkeypatch.setenv("INDEXER_CATEGORIES", "Anime, Music ,Games")
    assert load_vocabulary(str(tmp_path)) == ("Anime", "Music", "Games")


def test_vocabulary_from_json_found_upwards(tmp_path):
    (tmp_path / "categories.json").write_text(json.dumps(["Anime", "Music"]), encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert load_vocabulary(str(nested)) == ("Anime", "Music")


def test_malformed_json_falls_back_to_default(tmp_path):
    (tmp_path / "categories.json").write_text(json.dumps({"Anime": 1}), encoding="utf-8")
    assert load_vocabulary(str(tmp_path)) == DEFAULT_VOCABULARY


def test_dotenv_values(tmp_path):
    (tmp_path / ".env").write_text(
        "# catalog settings\n"
        "CATEGORY_ORDER=Position\n"
        "INDEXER_LISTING_URL='https://example.invalid/listing.tsv'\n"
        'INDEXER_DB_PATH="/tmp/indexers.sqlite3"\n',
        encoding="utf-8",
    )
    assert load_category_order(str(tmp_path)) == "position"
    assert load_listing_url(str(tmp_path)) == "https://example.invalid/listing.tsv"
    assert load_db_path(str(tmp_path)) == "/tmp/indexers.sqlite3"


def test_unknown_order_falls_back(tmp_path, monkeypatch):
    monkeypatch.setenv("CATEGORY_ORDER", "alphabetical")
    assert load_category_order(str(tmp_path)) == "length"


def test_label_collisions_are_logged(tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("INDEXER_CATEGORIES", "TV,TVShows")
    logger = logging.getLogger("config")
    logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.WARNING, logger="config"):
            assert load_vocabulary(str(tmp_path)) == ("TV", "TVShows")
    finally:
        logger.removeHandler(caplog.handler)
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert any("'TV' is contained in 'TVShows'" in msg for msg in warnings)


def test_duplicate_labels_are_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("INDEXER_CATEGORIES", "TV,Movies,TV")
    with pytest.raises(ValueError):
        load_vocabulary(str(tmp_path))


def test_base_urls_side_file(tmp_path):
    assert load_base_urls(str(tmp_path)) == {}
    (tmp_path / "indexer_base_urls.json").write_text(
        json.dumps({"DOGnzb": ["https://dognzb.example/"], "Broken": "https://not-a-list/"}),
        encoding="utf-8",
    )
    nested = tmp_path / "sub"
    nested.mkdir()
    assert load_base_urls(str(nested)) == {"DOGnzb": ["https://dognzb.example/"]}


def test_malformed_base_urls_file_is_ignored(tmp_path):
    (tmp_path / "indexer_base_urls.json").write_text("[1, 2]", encoding="utf-8")
    assert load_base_urls(str(tmp_path)) == {}
