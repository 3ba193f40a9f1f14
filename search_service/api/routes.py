"""API routes for search service."""

import asyncio
import time

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
import structlog

from sola_libs.common.config import SearchConfig
from sola_libs.common.metrics import MetricsCollector
from ..hybrid.exceptions import InvalidQueryError, SearchError
from ..hybrid.search_manager import SearchManager
from .schemas import (
    HybridSearchRequest,
    HybridSearchResponse,
    SemanticSearchRequest,
    SemanticSearchResponse,
)
from .shaping import hybrid_response, semantic_response

logger = structlog.get_logger("search_service.api")

router = APIRouter()


def get_search_manager(request: Request) -> SearchManager:
    """Get search manager from application state."""
    return request.app.state.search_manager


def get_config(request: Request) -> SearchConfig:
    """Get configuration from application state."""
    return request.app.state.config


def get_metrics(request: Request) -> MetricsCollector:
    """Get metrics collector from application state."""
    return request.app.state.metrics_collector


@router.post(
    "/search",
    response_model=SemanticSearchResponse,
    response_model_exclude_none=True,
)
async def semantic_search(
    request: SemanticSearchRequest,
    search_manager: SearchManager = Depends(get_search_manager),
    config: SearchConfig = Depends(get_config),
    metrics_collector: MetricsCollector = Depends(get_metrics)
):
    """Find the verses most similar to a query."""
    start_time = time.time()

    try:
        citations = await asyncio.wait_for(
            search_manager.semantic_search(request.query, request.limit),
            timeout=config.search_timeout_seconds
        )
    except InvalidQueryError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except asyncio.TimeoutError:
        logger.error("Search timed out", query=request.query)
        metrics_collector.record_search("semantic", time.time() - start_time, status="timeout")
        raise HTTPException(status_code=504, detail="Search timed out")
    except SearchError as e:
        logger.error("Search failed", query=request.query, error=str(e))
        metrics_collector.record_search("semantic", time.time() - start_time, status="error")
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}")

    metrics_collector.record_search("semantic", time.time() - start_time)

    logger.info(
        "Search completed",
        query=request.query,
        results_count=len(citations),
        latency_ms=(time.time() - start_time) * 1000
    )

    return semantic_response(request.query, citations)


@router.post(
    "/search/hybrid",
    response_model=HybridSearchResponse,
    response_model_exclude_none=True,
)
async def hybrid_search(
    request: HybridSearchRequest,
    search_manager: SearchManager = Depends(get_search_manager),
    config: SearchConfig = Depends(get_config),
    metrics_collector: MetricsCollector = Depends(get_metrics)
):
    """Combine semantic verse matches with topical index matches."""
    start_time = time.time()

    try:
        result = await asyncio.wait_for(
            search_manager.hybrid_search(request.query, request.verse_limit, request.topic_limit),
            timeout=config.search_timeout_seconds
        )
    except InvalidQueryError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except asyncio.TimeoutError:
        logger.error("Hybrid search timed out", query=request.query)
        metrics_collector.record_search("hybrid", time.time() - start_time, status="timeout")
        raise HTTPException(status_code=504, detail="Search timed out")
    except SearchError as e:
        logger.error("Hybrid search failed", query=request.query, error=str(e))
        metrics_collector.record_search("hybrid", time.time() - start_time, status="error")
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}")

    metrics_collector.record_search("hybrid", time.time() - start_time)

    logger.info(
        "Hybrid search completed",
        query=request.query,
        verses_count=len(result.verses),
        topics_count=len(result.topics),
        topic_card=result.topic_card is not None,
        latency_ms=(time.time() - start_time) * 1000
    )

    return hybrid_response(result)


@router.get("/health/postgres")
async def postgres_health(
    search_manager: SearchManager = Depends(get_search_manager)
):
    """Check the database behind the topical index and pgvector."""
    if not await search_manager.health_check():
        return JSONResponse(
            status_code=503,
            content={"status": "error", "error": "PostgreSQL connection not available"}
        )
    return {"status": "connected", "database": "postgres"}
