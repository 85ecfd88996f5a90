"""
SC Noticeboard — FastAPI Server
================================

Serves the normalized cause-list board and per-matter alert status.

Endpoints:
    GET  /api/board         Normalized board (cached for CACHE_TTL_SECONDS)
    POST /api/alerts        Status of tracked matters against the current board
    GET  /healthz           Health check

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production
    python api.py                         # Listens on PORT (default 3000)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from noticeboard import __version__
from noticeboard.cache import BoardCache
from noticeboard.config import Settings, load_settings
from noticeboard.matters import parse_matters
from noticeboard.models import Board, MatterStatus
from noticeboard.proximity import DEFAULT_THRESHOLD, ProximityEngine
from noticeboard.upstream import UpstreamClient

logger = logging.getLogger(__name__)


# ─── Application Lifespan (build the board cache) ───────────────────

_settings: Settings | None = None
_cache: BoardCache | None = None


def build_cache(settings: Settings) -> BoardCache:
    client = UpstreamClient(
        settings.upstream_url,
        timeout=settings.upstream_timeout_seconds,
        user_agent=settings.user_agent,
    )
    return BoardCache(client.fetch_board, ttl_seconds=settings.cache_ttl_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load settings and create the shared board cache on startup."""
    global _settings, _cache  # noqa: PLW0603
    _settings = load_settings()
    _cache = build_cache(_settings)
    yield
    _cache = None
    _settings = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="SC Noticeboard API",
    description=(
        "Live court cause-list board. Parses free-text sequence announcements "
        "into item numbers and reports how close tracked matters are."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────


class AlertsRequest(BaseModel):
    """Request body for the /api/alerts endpoint."""

    matters: str = Field(
        ...,
        description="Comma/newline separated <court>/<item> pairs.",
        json_schema_extra={"example": "1/12, C3/40\nRC1/7"},
    )
    threshold: int = Field(DEFAULT_THRESHOLD, ge=1, description="Items before the target to alert on.")


class AlertsResponse(BaseModel):
    updated_at: str
    statuses: list[MatterStatus]


class HealthResponse(BaseModel):
    ok: bool


_FETCH_FAILED = {"error": "Failed to fetch board"}


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_cache() -> BoardCache:
    global _settings, _cache  # noqa: PLW0603
    if _cache is None:
        _settings = _settings or load_settings()
        _cache = build_cache(_settings)
    return _cache


def _load_board() -> Board | None:
    try:
        return _get_cache().get()
    except Exception:
        logger.exception("Board fetch failed")
        return None


# ─── Endpoints ───────────────────────────────────────────────────────


@app.get("/healthz", summary="Health check", tags=["System"])
def health_check() -> HealthResponse:
    return HealthResponse(ok=True)


@app.get(
    "/api/board",
    summary="Normalized cause-list board",
    tags=["Board"],
    response_model=Board,
    responses={502: {"description": "Upstream feed unavailable"}},
)
def get_board(response: Response):
    """Return the board with camelCase keys, cached for the configured TTL."""
    board = _load_board()
    if board is None:
        return JSONResponse(status_code=502, content=_FETCH_FAILED)
    response.headers["Cache-Control"] = f"public, max-age={int(_get_cache().ttl_seconds)}"
    return board


@app.post(
    "/api/alerts",
    summary="Evaluate tracked matters",
    tags=["Alerts"],
    response_model=AlertsResponse,
    responses={502: {"description": "Upstream feed unavailable"}},
)
def evaluate_alerts(request: AlertsRequest):
    """Report each tracked matter's distance from the court's current item.

    Stateless: a fresh engine is used, so no notification state is kept
    between requests. Invalid matter entries are silently dropped.
    """
    board = _load_board()
    if board is None:
        return JSONResponse(status_code=502, content=_FETCH_FAILED)
    result = ProximityEngine().evaluate(parse_matters(request.matters), board, request.threshold)
    return AlertsResponse(updated_at=board.updated_at, statuses=result.statuses)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=load_settings().port)
