import json
import os
from typing import Dict, List, Optional, Tuple

from .domain.categories import (
    DEFAULT_VOCABULARY,
    ORDER_BY_LENGTH,
    ORDER_CHOICES,
    find_label_collisions,
)
from .logging import get_logger

log = get_logger("config")


def _find_upwards(start_dir: str, filename: str) -> Optional[str]:
    """Return first matching file found when walking up from start_dir.

    This makes running tools from subdirectories still find repository-level
    config files like `.env` and `categories.json`.
    """
    d = os.path.abspath(start_dir or ".")
    while True:
        candidate = os.path.join(d, filename)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(d)
        if parent == d:
            return None
        d = parent


def _read_dotenv(dotenv_dir: str) -> Dict[str, str]:
    """Minimal .env reader.

    - Reads key=value pairs, ignores comments (#/;) and blank lines.
    - Trims single/double quotes around the value.
    - Returns mapping; does not mutate environment.
    """
    env: Dict[str, str] = {}
    path = _find_upwards(dotenv_dir, ".env")
    if not path:
        log.debug(f"No .env found starting from: {os.path.abspath(dotenv_dir)}")
        return env
    try:
        with open(path, "r", encoding="utf-8") as f:
            for raw in f:
                line = raw.strip()
                if not line or line.startswith("#") or line.startswith(";"):
                    continue
                if "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip()
                if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
                    v = v[1:-1]
                env[k] = v.strip()
        log.debug(f"Loaded {len(env)} key(s) from .env at {path}")
    except OSError as e:
        log.warning(f"Failed reading .env: {e}")
    return env


def _lookup(dotenv_dir: str, key: str) -> Optional[str]:
    v = os.environ.get(key)
    if v and v.strip():
        return v.strip()
    v = _read_dotenv(dotenv_dir).get(key)
    return v.strip() if v and v.strip() else None


def _vocabulary_from_file(script_dir: str) -> Optional[Tuple[str, ...]]:
    path = _find_upwards(script_dir, "categories.json")
    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        log.warning(f"Failed to read categories.json: {e}")
        return None
    if not isinstance(data, list) or not all(isinstance(x, str) and x for x in data):
        log.warning(f"categories.json at {path} must be a JSON list of non-empty strings; ignoring")
        return None
    log.info(f"Loaded {len(data)} categories from {path}")
    return tuple(data)


def load_vocabulary(script_dir: str) -> Tuple[str, ...]:
    """Return the category vocabulary in its configured order.

    Lookup order: INDEXER_CATEGORIES (comma-separated, env or .env), then a
    categories.json list, then the built-in default.
    """
    raw = _lookup(script_dir, "INDEXER_CATEGORIES")
    vocabulary: Optional[Tuple[str, ...]] = None
    if raw:
        vocabulary = tuple(x.strip() for x in raw.split(",") if x.strip())
        log.info(f"Using INDEXER_CATEGORIES with {len(vocabulary)} label(s)")
    if not vocabulary:
        vocabulary = _vocabulary_from_file(script_dir)
    if not vocabulary:
        vocabulary = DEFAULT_VOCABULARY

    for short, long in find_label_collisions(vocabulary):
        log.warning(f"Category label '{short}' is contained in '{long}'; extraction may over-match")
    return vocabulary


def load_base_urls(script_dir: str) -> Dict[str, List[str]]:
    """Read extra indexer base URLs from an indexer_base_urls.json side file.

    The file maps indexer names to lists of URLs. Returns an empty mapping when
    the file is missing or malformed.
    """
    path = _find_upwards(script_dir, "indexer_base_urls.json")
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        log.warning(f"Failed to read indexer_base_urls.json: {e}")
        return {}
    if not isinstance(data, dict):
        log.warning(f"indexer_base_urls.json at {path} must be a JSON object; ignoring")
        return {}
    out: Dict[str, List[str]] = {}
    for name, urls in data.items():
        if not isinstance(urls, list) or not all(isinstance(u, str) and u for u in urls):
            log.warning(f"Ignoring base URLs for '{name}': expected a list of non-empty strings")
            continue
        out[name] = list(urls)
    log.info(f"Loaded base URLs for {len(out)} indexer(s) from {path}")
    return out


def load_category_order(dotenv_dir: str) -> str:
    v = _lookup(dotenv_dir, "CATEGORY_ORDER")
    if not v:
        return ORDER_BY_LENGTH
    v = v.lower()
    if v not in ORDER_CHOICES:
        log.warning(f"Unknown CATEGORY_ORDER '{v}'; falling back to '{ORDER_BY_LENGTH}'")
        return ORDER_BY_LENGTH
    return v


def load_listing_url(dotenv_dir: str) -> Optional[str]:
    return _lookup(dotenv_dir, "INDEXER_LISTING_URL")


def load_db_path(dotenv_dir: str) -> Optional[str]:
    return _lookup(dotenv_dir, "INDEXER_DB_PATH")
