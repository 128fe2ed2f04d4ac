"""FastAPI application creation and configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.core.dependencies import get_drucksache_repository, get_vector_store
from backend.drucksache.router import router as drucksache_router
from backend.sync.router import router as sync_router
from democrat.ai.vector_store import QdrantVectorStore
from democrat.core.error_utils import ErrorCategorizer
from democrat.core.exceptions import ConfigurationError, VectorStoreError
from democrat.drucksache.repository import DrucksacheRepository
from democrat.pipeline import build_scheduler, get_repository
from democrat.settings import SCHEDULER_ENABLED

logger = logging.getLogger(__name__)


def ensure_vector_collection() -> None:
    QdrantVectorStore().ensure_collection()


def create_app(enable_scheduler: Optional[bool] = None):
    """Create the FastAPI app with routes and middleware.

    With the scheduler enabled, sync and enrichment run in background threads
    of the API process on the same repository the endpoints read and write.
    """
    if enable_scheduler is None:
        enable_scheduler = SCHEDULER_ENABLED

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app.state.scheduler = None
        if enable_scheduler:
            try:
                await run_in_threadpool(ensure_vector_collection)
            except (ConfigurationError, VectorStoreError) as e:
                # Enrichment runs keep failing per document until Qdrant is reachable
                logger.error(
                    f"Could not prepare Qdrant collection: {e}",
                    extra=ErrorCategorizer.extract_error_metadata(e),
                )
            app.state.scheduler = build_scheduler(get_repository())
            app.state.scheduler.start()

        yield

        if app.state.scheduler is not None:
            app.state.scheduler.stop(timeout=5)

    app = FastAPI(
        title="Democrat API",
        description="Bundestag Drucksachen with AI summaries, categories and semantic search",
        version="0.1.0",
        redirect_slashes=False,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(sync_router)
    app.include_router(drucksache_router)

    @app.get("/healthcheck")
    async def health_check(
        request: Request,
        vector_store: QdrantVectorStore = Depends(get_vector_store),
        repository: DrucksacheRepository = Depends(get_drucksache_repository),
    ):
        """Health check with Qdrant connection verification."""
        scheduler = getattr(request.app.state, "scheduler", None)
        try:
            info = vector_store.client.get_collection(vector_store.collection_name)
            return JSONResponse(
                status_code=200,
                content={
                    "status": "healthy",
                    "database": "qdrant",
                    "collection": vector_store.collection_name,
                    "points": info.points_count,
                    "drucksachen": repository.count(),
                    "scheduler": "running" if scheduler and scheduler.running else "stopped",
                    "enrichment_running": bool(scheduler and scheduler.orchestrator.is_running),
                },
            )
        except Exception as e:
            return JSONResponse(status_code=503, content={"status": "unhealthy", "error": str(e)})

    return app
