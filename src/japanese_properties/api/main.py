"""
FastAPI Main Application

Japanese Properties REST API: upload a CSV of listings, then read them back.
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Depends, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import settings
from src.japanese_properties.api.dependencies import get_store
from src.japanese_properties.api.schemas import HealthCheck
from src.japanese_properties.api.routers import properties
from src.japanese_properties.errors import (
    IngestError,
    InvalidRowError,
    MalformedCSVError,
    UploadTooLargeError,
)
from src.japanese_properties.ingestion.pipeline import IngestionPipeline
from src.japanese_properties.store.property_store import PropertyStore
from src.japanese_properties.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

INGEST_ERROR_STATUS = {
    MalformedCSVError: 400,
    InvalidRowError: 422,
    UploadTooLargeError: 413,
}


async def ingest_error_handler(request: Request, exc: IngestError) -> JSONResponse:
    """Turn a rejected upload into a structured client error."""
    status_code = INGEST_ERROR_STATUS.get(type(exc), 400)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def unknown_route_handler(request: Request, exc: StarletteHTTPException):
    """Answer requests for routes that do not exist with a friendly 404."""
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content={"detail": "The page you're looking for doesn't exist"},
        )
    return await http_exception_handler(request, exc)


def create_app(
    store: Optional[PropertyStore] = None,
    pipeline: Optional[IngestionPipeline] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        store: Store to serve from (a fresh empty one if omitted)
        pipeline: Pipeline feeding ``store`` (built from settings if omitted)

    Returns:
        Configured FastAPI application
    """
    setup_logging()

    if store is None:
        store = pipeline.store if pipeline is not None else PropertyStore()
    if pipeline is None:
        pipeline = IngestionPipeline(store)

    app = FastAPI(
        title=settings.app_name,
        description="Upload a CSV of Japanese real estate listings and browse them as JSON",
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.store = store
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(IngestError, ingest_error_handler)
    app.add_exception_handler(StarletteHTTPException, unknown_route_handler)
    app.include_router(properties.router)

    @app.get("/up", response_class=PlainTextResponse, tags=["health"])
    def up():
        """Liveness probe."""
        return "200 OK"

    @app.get("/health", response_model=HealthCheck, tags=["health"])
    def health_check(store: PropertyStore = Depends(get_store)):
        """
        Health check endpoint.

        Returns:
            Health status with the generation currently being served
        """
        snapshot = store.snapshot()
        return HealthCheck(
            version=settings.version,
            property_count=len(snapshot),
            generation=snapshot.generation,
            loaded_at=snapshot.loaded_at,
            timestamp=datetime.now(timezone.utc),
        )

    logger.info("app_created", environment=settings.environment)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("server_starting", host=settings.host, port=settings.port)
    uvicorn.run(
        "src.japanese_properties.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
