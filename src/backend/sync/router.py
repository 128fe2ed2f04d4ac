import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from backend.core.dependencies import get_sync_engine
from backend.core.error_handling import handle_errors
from backend.sync.models import SyncTriggerResponse
from democrat.drucksache.sync import RegistrySyncEngine

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sync",
    tags=["sync"],
)


@router.post(
    "/trigger",
    response_model=SyncTriggerResponse,
    operation_id="trigger_drucksache_sync",
    summary="Run a full DIP sync now",
    description="Synchronously walks every DIP page and upserts the bill drafts. "
    "Returns once the sync has finished.",
)
@handle_errors
async def trigger_sync(engine: RegistrySyncEngine = Depends(get_sync_engine)):
    logger.info("Manual sync triggered")
    result = await run_in_threadpool(engine.sync)
    return SyncTriggerResponse(synced=result.synced, errors=result.errors)
