"""FastAPI application exposing brain search over HTTP."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from brainindex.config import AppConfig
from brainindex.errors import EmptyQuery, UnknownCategory
from brainindex.service import BrainIndexService

LOGGER = logging.getLogger(__name__)

DEFAULT_LIMITS = {"apis": 20, "docs": 20, "concepts": 20}
EXAMPLE_QUERY = {"query": "harmonic algorithm"}


class SearchPayload(BaseModel):
    query: str | None = None
    limits: Dict[str, int] | None = None
    use_index: bool = True
    category: str | None = None


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _service(request: Request) -> BrainIndexService:
    return request.app.state.service


def _server_error(error: str, exc: Exception) -> HTTPException:
    return HTTPException(status_code=500, detail={"error": error, "message": str(exc)})


def create_app(service: BrainIndexService | None = None, *, initialize: bool = True) -> FastAPI:
    """Build the web app around an index service.

    With ``initialize`` the index is built when the server starts instead
    of on the first query.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        if initialize:
            await asyncio.to_thread(app.state.service.initialize)
        yield

    app = FastAPI(title="Brain Index", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.service = service or BrainIndexService(AppConfig())

    @app.post("/api/brain/search")
    async def search_brain(payload: SearchPayload, request: Request) -> dict[str, Any]:
        """Indexed search first, full scan when the index has no hits."""
        query = (payload.query or "").strip()
        if not query:
            raise HTTPException(
                status_code=400,
                detail={"error": "missing_query", "example": EXAMPLE_QUERY},
            )

        service = _service(request)
        try:
            if payload.use_index:
                indexed = await asyncio.to_thread(service.search_indexed, payload.query, payload.category)
                if indexed["results"]:
                    return {
                        "ok": True,
                        "query": payload.query,
                        "search_method": "indexed",
                        "keywords_extracted": indexed["keywords"],
                        "indexed_results": indexed["results"],
                        "timestamp": _timestamp(),
                    }

            limits = {**DEFAULT_LIMITS, **(payload.limits or {})}
            result = await asyncio.to_thread(service.search_full, query, limits)
        except (UnknownCategory, EmptyQuery) as exc:
            raise HTTPException(status_code=400, detail={"error": "invalid_request", "message": str(exc)})
        except Exception as exc:
            LOGGER.exception("Brain search error: %s", exc)
            raise _server_error("search_failed", exc) from exc

        counts = {category: len(records) for category, records in result.items()}
        counts["total"] = sum(counts.values())
        return {
            "ok": True,
            "query": payload.query,
            "search_method": "full_scan",
            "timestamp": _timestamp(),
            "counts": counts,
            "results": result,
        }

    @app.get("/api/brain/stats")
    async def brain_stats(request: Request) -> dict[str, Any]:
        stats = _service(request).corpus_stats()
        return {
            "ok": True,
            "timestamp": _timestamp(),
            "brain": {
                "storage": stats,
                "status": "ready" if all(entry["exists"] for entry in stats.values()) else "partial",
            },
        }

    @app.get("/api/brain/index/stats")
    async def index_stats(request: Request) -> dict[str, Any]:
        return {"ok": True, "timestamp": _timestamp(), "index": _service(request).get_stats()}

    @app.post("/api/brain/index/rebuild")
    async def rebuild_index(request: Request) -> dict[str, Any]:
        try:
            stats = await asyncio.to_thread(_service(request).rebuild)
        except Exception as exc:
            LOGGER.exception("Index rebuild error: %s", exc)
            raise _server_error("rebuild_failed", exc) from exc
        return {
            "ok": True,
            "message": "Index rebuilt successfully",
            "result": stats.to_dict(),
            "timestamp": _timestamp(),
        }

    @app.post("/api/brain/index/initialize")
    async def initialize_index(request: Request) -> dict[str, Any]:
        try:
            stats = await asyncio.to_thread(_service(request).initialize)
        except Exception as exc:
            LOGGER.exception("Index initialization error: %s", exc)
            raise _server_error("init_failed", exc) from exc
        return {
            "ok": True,
            "message": "Index initialized successfully",
            "result": stats.to_dict(),
            "timestamp": _timestamp(),
        }

    @app.get("/api/brain/index/freshness")
    async def index_freshness(request: Request, max_age_ms: int | None = None) -> dict[str, Any]:
        return {"ok": True, "timestamp": _timestamp(), **_service(request).check_freshness(max_age_ms)}

    @app.get("/api/brain/info")
    async def brain_info() -> dict[str, Any]:
        return {
            "ok": True,
            "system": "Brain Index",
            "version": app.version,
            "capabilities": [
                "Search APIs by name, path, tags",
                "Search documentation by title, keywords",
                "Search concepts by domain, definition",
                "Indexed keyword search",
                "Full-text fallback search",
                "Index freshness check",
            ],
            "storage_format": ["JSON"],
            "endpoints": {
                "search": "POST /api/brain/search",
                "stats": "GET /api/brain/stats",
                "index_stats": "GET /api/brain/index/stats",
                "index_rebuild": "POST /api/brain/index/rebuild",
                "index_init": "POST /api/brain/index/initialize",
                "index_freshness": "GET /api/brain/index/freshness",
                "info": "GET /api/brain/info",
            },
            "example_search": {**EXAMPLE_QUERY, "limits": DEFAULT_LIMITS, "use_index": True},
        }

    return app


app = create_app()
