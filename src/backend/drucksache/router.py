import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool

from backend.core.dependencies import (
    get_drucksache_repository,
    get_enrichment_client,
    get_vector_store,
)
from backend.core.error_handling import handle_errors
from backend.drucksache.models import SimilarSearch
from democrat.ai.client import EnrichmentClient
from democrat.ai.models import SearchResult
from democrat.ai.vector_store import QdrantVectorStore
from democrat.drucksache.models import Drucksache, DrucksachePage, DrucksacheQuery
from democrat.drucksache.repository import DrucksacheRepository
from democrat.enrichment.search import find_similar

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/drucksachen",
    tags=["drucksachen"],
)


@router.get(
    "",
    response_model=DrucksachePage,
    operation_id="list_drucksachen",
    summary="List stored Drucksachen",
    description="Filter by ressort, category, date range or free text; sorted and paginated.",
)
@handle_errors
async def list_drucksachen(
    query: Annotated[DrucksacheQuery, Query()],
    repository: DrucksacheRepository = Depends(get_drucksache_repository),
):
    return await run_in_threadpool(repository.find, query)


@router.get(
    "/search",
    response_model=DrucksachePage,
    operation_id="search_drucksachen",
    summary="Text search over titel, abstract and dokumentnummer",
)
@handle_errors
async def search_drucksachen(
    q: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    repository: DrucksacheRepository = Depends(get_drucksache_repository),
):
    query = DrucksacheQuery(search=q, page=page, limit=limit)
    return await run_in_threadpool(repository.find, query)


@router.get("/ressorts", response_model=List[str], operation_id="list_ressorts")
@handle_errors
async def list_ressorts(repository: DrucksacheRepository = Depends(get_drucksache_repository)):
    return await run_in_threadpool(repository.distinct_ressorts)


@router.get("/categories", response_model=List[str], operation_id="list_categories")
@handle_errors
async def list_categories(repository: DrucksacheRepository = Depends(get_drucksache_repository)):
    return await run_in_threadpool(repository.distinct_categories)


@router.post(
    "/similar",
    response_model=List[SearchResult],
    operation_id="find_similar_drucksachen",
    summary="Semantic search over enriched Drucksachen",
)
@handle_errors
async def similar_drucksachen(
    search: SimilarSearch,
    ai_client: EnrichmentClient = Depends(get_enrichment_client),
    vector_store: QdrantVectorStore = Depends(get_vector_store),
):
    return await run_in_threadpool(
        find_similar,
        search.query,
        ai_client,
        vector_store,
        limit=search.limit,
        category=search.category,
        ressort=search.ressort,
    )


@router.get("/{dip_id}", response_model=Drucksache, operation_id="get_drucksache")
@handle_errors
async def get_drucksache(
    dip_id: str, repository: DrucksacheRepository = Depends(get_drucksache_repository)
):
    doc = await run_in_threadpool(repository.get, dip_id)
    if doc is None:
        raise HTTPException(status_code=404, detail="Drucksache nicht gefunden")
    return doc
