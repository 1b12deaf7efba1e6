from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from starlette.testclient import TestClient

# Ensure the repository's src/ is importable
sys.path.insert(0, os.path.abspath("src"))

from indexer_catalog.catalog import CatalogImportService, IndexerCatalog, create_app
from indexer_catalog.catalog.sample import SAMPLE_LISTING
from indexer_catalog.domain.categories import DEFAULT_VOCABULARY


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.delenv("CATEGORY_ORDER", raising=False)
    (tmp_path / "README.md").write_text("test marker", encoding="utf-8")
    db_path = str(tmp_path / "catalog.sqlite3")
    CatalogImportService(IndexerCatalog(db_path=db_path)).import_listing(SAMPLE_LISTING)
    app = create_app(root_dir=str(tmp_path), db_path=db_path, vocabulary=DEFAULT_VOCABULARY, allow_origins=["*"])
    return TestClient(app)


def test_health_and_summary(client: TestClient) -> None:
    health = client.get("/api/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"

    summary = client.get("/api/summary")
    assert summary.status_code == 200
    payload = summary.json()
    assert payload["total"] == 20
    assert payload["categories"]["Console"] == 12


def test_indexer_listing_and_filters(client: TestClient) -> None:
    resp = client.get("/api/indexers", params={"category": "Console", "limit": 5})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["total"] == 12
    assert payload["limit"] == 5
    assert len(payload["items"]) == 5

    # limit is clamped
    resp = client.get("/api/indexers", params={"limit": 10_000})
    assert resp.json()["limit"] == 500

    resp = client.get("/api/indexers", params={"protocol": "ftp"})
    assert resp.status_code == 400


def test_indexer_detail(client: TestClient) -> None:
    resp = client.get("/api/indexers/DOGnzb")
    assert resp.status_code == 200
    assert resp.json()["available_base_urls"] == []
    assert client.get("/api/indexers/abNZB").json()["available_base_urls"] == ["https://abnzb.com/"]
    assert resp.json()["categories"] == ["Console", "Movies", "Audio", "Books", "Other", "XXX", "PC", "TV"]

    assert client.get("/api/indexers/NoSuchIndexer").status_code == 404


def test_category_endpoints(client: TestClient) -> None:
    resp = client.get("/api/categories")
    assert resp.json()["items"] == list(DEFAULT_VOCABULARY)

    resp = client.get("/api/categories/extract", params={"blob": "TVMoviesJunk"})
    assert resp.status_code == 200
    assert resp.json() == {"blob": "TVMoviesJunk", "categories": ["Movies", "TV"], "residue": "Junk"}

    resp = client.get("/api/categories/extract", params={"blob": "TVMovies", "order": "position"})
    assert resp.json()["categories"] == ["TV", "Movies"]

    resp = client.get("/api/categories/extract", params={"blob": "TV", "order": "random"})
    assert resp.status_code == 400
