from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import pytest
from starlette.testclient import TestClient

# Ensure the repository's src/ is importable
sys.path.insert(0, os.path.abspath("src"))

from indexer_catalog.cli import main as cli


@pytest.fixture(autouse=True)
def _workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in ("INDEXER_CATEGORIES", "CATEGORY_ORDER", "INDEXER_LISTING_URL", "INDEXER_DB_PATH"):
        monkeypatch.delenv(key, raising=False)
    (tmp_path / "README.md").write_text("marker", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_categories_command(capsys):
    assert cli.main(["categories", "TVMovies"]) == 0
    assert json.loads(capsys.readouterr().out) == ["Movies", "TV"]

    assert cli.main(["categories", "TVMovies", "--order", "position"]) == 0
    assert json.loads(capsys.readouterr().out) == ["TV", "Movies"]


def test_categories_strict_failure():
    assert cli.main(["categories", "MoviesJunk", "--strict"]) == 1


def test_parse_command_reads_file(tmp_path: Path, capsys):
    listing = tmp_path / "listing.tsv"
    listing.write_text("torrent\t1337x\ten-US\tPublic site\tPublic\tConsoleTV\n", encoding="utf-8")
    assert cli.main(["parse", "--input", str(listing)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data[0]["name"] == "1337x"
    assert data[0]["categories"] == ["Console", "TV"]


def test_parse_missing_file_is_an_error():
    assert cli.main(["parse", "--input", "does-not-exist.tsv"]) == 2


def test_import_and_list(tmp_path: Path, capsys):
    db = str(tmp_path / "cat.sqlite3")
    assert cli.main(["import", "--sample", "--db", db]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["created"] == 20
    assert summary["db_path"] == db

    assert cli.main(["list", "--db", db, "--category", "XXX"]) == 0
    listed = json.loads(capsys.readouterr().out)
    assert listed["total"] > 0
    assert all("XXX" in item["categories"] for item in listed["items"])


def test_import_from_url(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.setattr(
        cli,
        "fetch_listing",
        lambda url, timeout: "torrent\tBitHDTV\ten-US\tHD tracker\tPrivate\tMoviesAudioTVXXXOther",
    )
    monkeypatch.setenv("INDEXER_LISTING_URL", "https://example.invalid/listing.tsv")
    db = str(tmp_path / "cat.sqlite3")
    assert cli.main(["import", "--url", "--db", db]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert (summary["created"], summary["total"]) == (1, 1)


def test_import_url_without_configuration():
    assert cli.main(["import", "--url"]) == 2


def test_list_limit_is_clamped(tmp_path: Path, capsys):
    db = str(tmp_path / "cat.sqlite3")
    assert cli.main(["import", "--sample", "--db", db]) == 0
    capsys.readouterr()

    assert cli.main(["list", "--db", db, "--limit", "-1"]) == 0
    listed = json.loads(capsys.readouterr().out)
    assert listed["limit"] == 1
    assert len(listed["items"]) == 1
    assert listed["total"] == 20


def test_list_with_unusable_database_path(tmp_path: Path):
    not_a_db = tmp_path / "somedir"
    not_a_db.mkdir()
    assert cli.main(["list", "--db", str(not_a_db)]) == 1


def test_duplicate_labels_in_env_are_a_usage_error(monkeypatch):
    monkeypatch.setenv("INDEXER_CATEGORIES", "TV,TV")
    assert cli.main(["categories", "TV"]) == 2


def test_duplicate_labels_in_categories_json_are_a_usage_error(tmp_path: Path):
    (tmp_path / "categories.json").write_text(json.dumps(["Movies", "Movies"]), encoding="utf-8")
    assert cli.main(["categories", "Movies"]) == 2


def test_strict_import_rejects_unmatched_blob(tmp_path: Path):
    listing = tmp_path / "bad.tsv"
    listing.write_text("torrent\tAnimeBytes\ten-US\tAnime tracker\tPrivate\tMoviesAnime\n", encoding="utf-8")
    db = tmp_path / "cat.sqlite3"
    assert cli.main(["import", "--strict", "--input", str(listing), "--db", str(db)]) == 1


def test_import_uses_base_urls_side_file(tmp_path: Path, capsys):
    (tmp_path / "indexer_base_urls.json").write_text(
        json.dumps({"DOGnzb": ["https://dognzb.example/"]}), encoding="utf-8"
    )
    db = str(tmp_path / "cat.sqlite3")
    assert cli.main(["import", "--sample", "--db", db]) == 0
    capsys.readouterr()

    assert cli.main(["list", "--db", db, "--limit", "500"]) == 0
    by_name = {item["name"]: item for item in json.loads(capsys.readouterr().out)["items"]}
    assert by_name["DOGnzb"]["available_base_urls"] == ["https://dognzb.example/"]
    assert by_name["abNZB"]["available_base_urls"] == ["https://abnzb.com/"]


def test_serve_passes_origins_to_app(tmp_path: Path, monkeypatch):
    import uvicorn

    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    db = str(tmp_path / "cat.sqlite3")
    assert cli.main(["serve", "--db", db, "--allow-origin", "*", "--port", "9001"]) == 0

    app, kwargs = calls[0]
    assert kwargs == {"host": "127.0.0.1", "port": 9001, "log_level": "info"}
    resp = TestClient(app).get("/api/health", headers={"Origin": "https://example.invalid"})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] in ("*", "https://example.invalid")
    assert resp.json()["db_path"] == db
