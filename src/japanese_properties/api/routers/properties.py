"""
Properties Router

Endpoints for uploading, listing and fetching properties.
"""
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from src.japanese_properties.api.dependencies import get_pipeline, get_store
from src.japanese_properties.api.schemas import IngestErrorResponse, PropertyDetail, UploadResult
from src.japanese_properties.errors import PropertyNotFoundError
from src.japanese_properties.ingestion.pipeline import IngestionPipeline
from src.japanese_properties.store.property_store import PropertyStore

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=List[PropertyDetail])
def list_properties(store: PropertyStore = Depends(get_store)):
    """
    List every property from the most recent upload.

    Returns:
        All properties ordered by id (empty before the first upload)
    """
    return list(store.get_all())


@router.post(
    "/upload",
    response_model=UploadResult,
    responses={
        400: {"model": IngestErrorResponse, "description": "Malformed CSV"},
        413: {"model": IngestErrorResponse, "description": "Upload too large"},
        422: {"model": IngestErrorResponse, "description": "Invalid row"},
    },
)
async def upload_properties(
    file: UploadFile = File(..., description="CSV file of property listings"),
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """
    Replace all stored properties with the contents of an uploaded CSV.

    The upload is all-or-nothing: if any row is rejected the previously
    uploaded properties keep being served.

    Args:
        file: Multipart form field named ``file``
        pipeline: Ingestion pipeline bound to the application store

    Returns:
        Number of properties ingested and the new store generation
    """
    # Read one byte past the limit so oversized uploads are detectable
    limit = pipeline.max_upload_bytes + 1 if pipeline.max_upload_bytes else -1
    raw_bytes = await file.read(limit)
    await file.close()

    summary = await run_in_threadpool(pipeline.run, raw_bytes)
    return UploadResult(count=summary.count, generation=summary.generation)


@router.get("/{property_id}", response_model=PropertyDetail)
def get_property_detail(
    property_id: int,
    store: PropertyStore = Depends(get_store),
):
    """
    Get a single property by id.

    Args:
        property_id: Id assigned at upload time (first data row is 1)
        store: Property store

    Returns:
        Property details

    Raises:
        HTTPException: 404 if property not found
    """
    try:
        return store.get_by_id(property_id)
    except PropertyNotFoundError:
        raise HTTPException(status_code=404, detail="Property not found")
