from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from sports_hub.api.schemas import (
    CacheStatsResponse,
    ErrorResponse,
    FetchResponse,
    ProgressResponse,
)
from sports_hub.cache.sweeper import CacheSweeper
from sports_hub.core.config import Settings, settings as default_settings
from sports_hub.core.log_setup import configure_logging
from sports_hub.db.enums import DataTypeEnum
from sports_hub.orchestrator import FetchOrchestrator, OrchestratorContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sports", tags=["Sports data"])

DATA_TYPES = ", ".join(t.value for t in DataTypeEnum)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def get_orchestrator(request: Request) -> FetchOrchestrator:
    return request.app.state.orchestrator


@router.get(
    "/fetch-data",
    response_model=FetchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def fetch_data(
    data_type: str | None = Query(None, alias="type", description=DATA_TYPES),
    league: str | None = Query(None, description="League slug, e.g. premier-league"),
    region: str | None = Query(None, description="Regional customization key"),
    progress: bool = Query(False, description="Include the finished session's progress report"),
    orchestrator: FetchOrchestrator = Depends(get_orchestrator),
):
    """
    Return normalized sports data from cache, a live provider, or the fallback
    dataset. Provider failures never fail the request.
    """
    if not data_type:
        return _error(status.HTTP_400_BAD_REQUEST, f"Data type is required ({DATA_TYPES})")
    try:
        kind = DataTypeEnum(data_type)
    except ValueError:
        return _error(
            status.HTTP_400_BAD_REQUEST, f"Unknown data type {data_type!r} ({DATA_TYPES})"
        )

    try:
        result = await orchestrator.request_data(kind, league=league, region=region)
    except Exception:
        logger.exception("Error fetching sports data")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    body = result.as_response()
    if progress and result.session_id is not None:
        snapshot = orchestrator.ctx.progress.get(result.session_id)
        if snapshot is not None:
            body["progress"] = snapshot.as_dict()
    return body


@router.get(
    "/progress",
    response_model=ProgressResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_progress(
    session: str | None = Query(None, description="Session id returned by fetch-data"),
    orchestrator: FetchOrchestrator = Depends(get_orchestrator),
):
    if not session:
        return _error(status.HTTP_400_BAD_REQUEST, "Session ID is required")

    snapshot = orchestrator.ctx.progress.get(session)
    if snapshot is None:
        return _error(status.HTTP_404_NOT_FOUND, "Session not found")

    return {"session_id": snapshot.session_id, "progress": snapshot.as_dict()}


@router.get("/cache-stats", response_model=CacheStatsResponse)
async def cache_stats(orchestrator: FetchOrchestrator = Depends(get_orchestrator)):
    return orchestrator.ctx.cache.stats().as_dict()


def create_app(
    context: OrchestratorContext | None = None,
    *,
    settings: Settings | None = None,
    run_sweeper: bool = True,
) -> FastAPI:
    settings = settings or (context.settings if context is not None else default_settings)
    configure_logging(settings.log_level)
    context = context or OrchestratorContext.from_settings(settings)
    orchestrator = FetchOrchestrator(context)
    sweeper = CacheSweeper(context.cache, interval_s=settings.cache_sweep_interval_s)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if run_sweeper:
            sweeper.start()
        try:
            yield
        finally:
            await sweeper.stop()
            await orchestrator.aclose()

    app = FastAPI(title="sports-hub", lifespan=lifespan)
    app.state.orchestrator = orchestrator
    app.state.sweeper = sweeper
    app.include_router(router)
    return app
