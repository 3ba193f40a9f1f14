"""Search service main application."""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from sola_libs.common.config import SearchConfig
from sola_libs.common.logging import REQUEST_ID_HEADER, configure_logging, request_context
from sola_libs.common.metrics import MetricsCollector
from .api.routes import router as api_router
from .hybrid.search_manager import create_search_manager

logger = structlog.get_logger("search_service")

SERVICE_NAME = "search-service"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    config: SearchConfig = app.state.config
    configure_logging(SERVICE_NAME, config.log_level, config.log_format, env=config.app_env)

    logger.info("Starting search service")

    app.state.metrics_collector = MetricsCollector(SERVICE_NAME)
    app.state.search_manager = create_search_manager(config, metrics=app.state.metrics_collector)

    logger.info("Search service started successfully")

    yield

    # Shutdown
    logger.info("Shutting down search service")
    await app.state.search_manager.cleanup()
    logger.info("Search service shutdown complete")


def create_app(config: Optional[SearchConfig] = None) -> FastAPI:
    """Create the FastAPI application.

    Adapters are built in the lifespan, so creating the app opens no
    connections.
    """
    config = config or SearchConfig()

    app = FastAPI(
        title=config.api_title,
        description="Hybrid semantic and topical scripture search",
        version=config.api_version,
        lifespan=lifespan
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=config.api_prefix)

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time and request ID headers to responses."""
        start_time = time.time()
        with request_context(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Collect metrics for HTTP requests."""
        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.error("Unhandled error", path=request.url.path, error=str(e))
            status_code = 500
            response = JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "detail": str(e)}
            )

        duration = time.time() - start_time

        if hasattr(app.state, 'metrics_collector'):
            app.state.metrics_collector.record_http_request(
                method=request.method,
                endpoint=request.url.path,
                status=status_code,
                duration=duration
            )

        return response

    @app.get("/health")
    async def health_check():
        """Liveness check."""
        return {"status": "healthy", "service": SERVICE_NAME}

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        if hasattr(app.state, 'metrics_collector'):
            metrics_data = app.state.metrics_collector.get_metrics()
            return Response(content=metrics_data, media_type="text/plain")
        else:
            return Response(content="# No metrics available\n", media_type="text/plain")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": SERVICE_NAME,
            "version": config.api_version,
            "status": "running",
            "endpoints": {
                "health": "/health",
                "postgres_health": f"{config.api_prefix}/health/postgres",
                "metrics": "/metrics",
                "search": f"{config.api_prefix}/search",
                "hybrid_search": f"{config.api_prefix}/search/hybrid"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "search_service.main:app",
        host="0.0.0.0",
        port=app.state.config.port,
        log_level="info"
    )
