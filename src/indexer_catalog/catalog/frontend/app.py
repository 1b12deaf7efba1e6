from __future__ import annotations

from typing import List, Optional, Sequence

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ...config import load_category_order, load_vocabulary
from ...domain.categories import ORDER_CHOICES, extract_categories, residue
from ...logging import get_logger
from ...paths import find_project_root
from ..constants import LIST_LIMIT_DEFAULT, LIST_LIMIT_MAX, LIST_LIMIT_MIN, LIST_OFFSET_MAX
from ..db import IndexerCatalog


LOG = get_logger("catalog-frontend")


def _parse_int(value: Optional[str], *, default: int, minimum: int, maximum: int) -> int:
    try:
        parsed = int(value) if value is not None else default
    except (TypeError, ValueError):
        parsed = default
    if parsed < minimum:
        return minimum
    if parsed > maximum:
        return maximum
    return parsed


def create_app(
    root_dir: Optional[str] = None,
    *,
    db_path: Optional[str] = None,
    vocabulary: Optional[Sequence[str]] = None,
    allow_origins: Optional[List[str]] = None,
) -> Starlette:
    """Create a Starlette app exposing the indexer catalog as a read-only JSON API."""

    project_root = find_project_root(root_dir)
    db = IndexerCatalog(root_dir=project_root, db_path=db_path)
    labels = tuple(vocabulary) if vocabulary else load_vocabulary(project_root)
    default_order = load_category_order(project_root)

    async def health(_: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "db_path": db.db_path})

    async def summary(_: Request) -> JSONResponse:
        return JSONResponse(db.fetch_summary())

    async def indexers(request: Request) -> JSONResponse:
        qp = request.query_params
        limit = _parse_int(
            qp.get("limit"), default=LIST_LIMIT_DEFAULT, minimum=LIST_LIMIT_MIN, maximum=LIST_LIMIT_MAX
        )
        offset = _parse_int(qp.get("offset"), default=0, minimum=0, maximum=LIST_OFFSET_MAX)
        try:
            payload = db.list_indexers(
                category=qp.get("category") or None,
                protocol=qp.get("protocol") or None,
                limit=limit,
                offset=offset,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return JSONResponse(payload)

    async def indexer_detail(request: Request) -> JSONResponse:
        name = request.path_params["name"]
        payload = db.get_indexer(name)
        if payload is None:
            raise HTTPException(status_code=404, detail="Indexer not found")
        return JSONResponse(payload)

    async def categories(_: Request) -> JSONResponse:
        return JSONResponse({"items": list(labels)})

    async def categories_extract(request: Request) -> JSONResponse:
        qp = request.query_params
        blob = qp.get("blob", "")
        order = qp.get("order") or default_order
        if order not in ORDER_CHOICES:
            raise HTTPException(status_code=400, detail=f"order must be one of {ORDER_CHOICES}")
        return JSONResponse(
            {
                "blob": blob,
                "categories": extract_categories(blob, labels, order=order),
                "residue": residue(blob, labels),
            }
        )

    routes = [
        Route("/api/health", health, methods=["GET"]),
        Route("/api/summary", summary, methods=["GET"]),
        Route("/api/indexers", indexers, methods=["GET"]),
        Route("/api/indexers/{name:str}", indexer_detail, methods=["GET"]),
        Route("/api/categories", categories, methods=["GET"]),
        Route("/api/categories/extract", categories_extract, methods=["GET"]),
    ]

    app = Starlette(debug=False, routes=routes)

    origins = allow_origins or ["http://localhost:3000", "http://127.0.0.1:3000"]
    if "*" in origins:
        cors_allow_origins = ["*"]
    else:
        cors_allow_origins = origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    LOG.info(f"Catalog API ready with {len(labels)} categories (db: {db.db_path})")
    return app


__all__ = ["create_app"]
