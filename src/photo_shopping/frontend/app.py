from __future__ import annotations

import os
from typing import List, Optional

import requests
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse
from starlette.routing import Route

from ..config import load_search_options, load_search_url, load_tesseract
from ..domain.models import SearchOptions
from ..errors import ShoppingListError
from ..logging import get_logger
from ..orchestrator import ShoppingListExtractor, TesseractTextDetector, TextDetector
from ..search.client import ShoppingSearchClient


LOG = get_logger("frontend")

MAX_RESULTS_LIMIT = 100


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
    detector: Optional[TextDetector] = None,
    search_client: Optional[ShoppingSearchClient] = None,
    options: Optional[SearchOptions] = None,
    allow_origins: Optional[List[str]] = None,
) -> Starlette:
    """Create a Starlette app exposing shopping list extraction and search."""

    config_dir = root_dir or os.getcwd()
    if detector is None:
        cmd, lang = load_tesseract(config_dir)
        detector = TesseractTextDetector(lang=lang, tesseract_cmd=cmd)
    if search_client is None:
        search_client = ShoppingSearchClient(load_search_url(config_dir))
    default_options = options or load_search_options(config_dir)
    extractor = ShoppingListExtractor(detector)

    async def health(_: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    async def shopping_list(request: Request) -> JSONResponse:
        image_bytes = await request.body()
        LOG.info(f"Received image upload ({len(image_bytes)} bytes)")
        try:
            queries = await run_in_threadpool(extractor.extract_shopping_list, image_bytes)
        except ShoppingListError as exc:
            LOG.warning(f"Shopping list extraction failed: {exc}")
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return JSONResponse({"queries": queries})

    async def search(request: Request) -> HTMLResponse:
        qp = request.query_params
        query = (qp.get("q") or "").strip()
        if not query:
            raise HTTPException(status_code=400, detail="Missing query parameter 'q'")
        opts = SearchOptions(
            language=qp.get("language") or default_options.language,
            max_results=_parse_int(
                qp.get("max_results"),
                default=default_options.max_results,
                minimum=1,
                maximum=MAX_RESULTS_LIMIT,
            ),
        )
        try:
            page = await run_in_threadpool(search_client.fetch_results_page, query, opts)
        except requests.RequestException as exc:
            raise HTTPException(status_code=502, detail=f"Search failed: {exc}") from exc
        return HTMLResponse(page)

    routes = [
        Route("/api/health", health, methods=["GET"]),
        Route("/api/shopping-list", shopping_list, methods=["POST"]),
        Route("/api/search", search, methods=["GET"]),
    ]

    app = Starlette(debug=False, routes=routes)

    origins = allow_origins or ["http://localhost:5173", "http://127.0.0.1:5173"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if "*" in origins else origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


__all__ = ["create_app"]
