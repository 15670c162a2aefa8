from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from citegraph.config.settings import settings
from citegraph.errors import AnalysisTooLargeError, CorpusLoadError
from citegraph.export.views import (
    BetweennessView,
    GlobalStatsView,
    GraphView,
    HIndexView,
    KCoreView,
    SearchView,
    SelectView,
    StatsView,
    build_betweenness_view,
    build_hindex_view,
    build_kcore_view,
    build_search_view,
)
from citegraph.ingest.loader import find_data_file, load_papers
from citegraph.service import AnalyticsService

logger = logging.getLogger("citegraph.web")
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))


# -------------------------------------------------------------------
# Lifespan: load the corpus once at startup
# -------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup handler:
    - If a service was injected (tests, CLI), use it as-is.
    - Otherwise load the configured corpus into a fresh service.
    - If loading fails, log it and serve an empty graph.
    """
    if getattr(app.state, "service", None) is None:
        service = AnalyticsService()
        try:
            path = find_data_file()
            service.load(load_papers(path))
        except CorpusLoadError:
            logger.exception("Failed to load corpus; starting with an empty graph")
        app.state.service = service

    yield


def _get_service(request: Request) -> AnalyticsService:
    """
    Fetch the service from app.state, initializing an empty one if needed.
    """
    service = getattr(request.app.state, "service", None)
    if service is None:
        service = AnalyticsService()
        request.app.state.service = service
    return service


def _require_id(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise HTTPException(status_code=400, detail="Query parameter 'id' is required")
    return value.strip()


def create_app(service: Optional[AnalyticsService] = None) -> FastAPI:
    app = FastAPI(
        title="CiteGraph API",
        description=(
            "Betweenness, k-core and h-index analytics over an interactively "
            "explored citation graph."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Log method, path, and response status.
        """
        logger.info(f"Incoming request: {request.method} {request.url.path}")
        start = time.time()

        response = await call_next(request)

        duration_ms = (time.time() - start) * 1000
        logger.info(
            f"Completed {request.method} {request.url.path} "
            f"with status {response.status_code} in {duration_ms:.2f}ms"
        )

        return response

    # -------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------

    @app.get("/health", summary="Health check")
    async def health(request: Request) -> dict:
        svc = _get_service(request)
        return {"status": "ok", "papers": svc.store.node_count}

    @app.get("/graph", response_model=GraphView, summary="Visible subgraph for rendering")
    async def graph(request: Request) -> GraphView:
        return await run_in_threadpool(_get_service(request).graph_view)

    @app.get("/stats", response_model=StatsView, summary="Counts over the visible subgraph")
    async def stats(request: Request) -> StatsView:
        return await run_in_threadpool(_get_service(request).stats)

    @app.get(
        "/global-stats",
        response_model=GlobalStatsView,
        summary="Most cited / most referencing papers in the whole corpus",
    )
    async def global_stats(request: Request) -> GlobalStatsView:
        return await run_in_threadpool(_get_service(request).global_stats)

    @app.get("/select", response_model=SelectView, summary="Add a paper to the visible graph")
    async def select(request: Request, id: Optional[str] = None) -> SelectView:
        paper_id = _require_id(id)
        paper = await run_in_threadpool(_get_service(request).select, paper_id)
        if paper is None:
            raise HTTPException(status_code=404, detail=f"Paper {paper_id} not found")
        return SelectView(id=paper.id, short_id=paper.short_id)

    @app.get(
        "/h-index",
        response_model=HIndexView,
        summary="H-index of a paper; its h-core becomes visible",
    )
    async def h_index(request: Request, id: Optional[str] = None) -> HIndexView:
        paper_id = _require_id(id)
        svc = _get_service(request)

        outcome = await run_in_threadpool(svc.h_index, paper_id)
        if outcome is None:
            raise HTTPException(status_code=404, detail=f"Paper {paper_id} not found")

        result, added = outcome
        return build_hindex_view(svc.store, result, new_nodes_added=added)

    @app.get(
        "/betweenness",
        response_model=BetweennessView,
        summary="Betweenness centrality of the visible subgraph",
    )
    async def betweenness(request: Request) -> BetweennessView:
        svc = _get_service(request)
        try:
            scores = await run_in_threadpool(svc.betweenness)
        except AnalysisTooLargeError as exc:
            raise HTTPException(status_code=413, detail=str(exc))

        return build_betweenness_view(svc.store, scores, top_n=svc.settings.BETWEENNESS_TOP_N)

    @app.get("/k-core", response_model=KCoreView, summary="K-core of the visible subgraph")
    async def k_core(
        request: Request,
        k: int = Query(..., ge=1, description="Minimum degree inside the core."),
    ) -> KCoreView:
        svc = _get_service(request)
        result = await run_in_threadpool(svc.k_core, k)
        return build_kcore_view(svc.store, result)

    @app.get("/clear", summary="Empty the visible graph")
    async def clear(request: Request) -> dict:
        await run_in_threadpool(_get_service(request).clear)
        return {"success": True}

    @app.get("/search", response_model=SearchView, summary="Search papers by id, title or author")
    async def search(request: Request, q: str = "") -> SearchView:
        hits = await run_in_threadpool(_get_service(request).search, q)
        return build_search_view(hits)

    return app


app = create_app()
