"""
FastAPI Dependencies

Provides dependency injection for the property store and the ingestion pipeline.
"""
from fastapi import Request

from src.japanese_properties.ingestion.pipeline import IngestionPipeline
from src.japanese_properties.store.property_store import PropertyStore


def get_store(request: Request) -> PropertyStore:
    """
    Property store dependency.

    Returns:
        The store attached to the running application
    """
    return request.app.state.store


def get_pipeline(request: Request) -> IngestionPipeline:
    """
    Ingestion pipeline dependency.

    Returns:
        The pipeline bound to the application's store
    """
    return request.app.state.pipeline
