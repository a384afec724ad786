"""
Pydantic Schemas for API Request/Response Models

These schemas define the JSON structure for API endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class PropertyDetail(BaseModel):
    """Property listing as returned by the list and detail endpoints."""
    id: int
    full_address: str
    prefecture: str
    city: str
    town: str
    chome: str
    banchi: str
    go: str
    building: str
    price: int
    nearest_station: str
    property_type: str
    land_area: Optional[float] = None

    class Config:
        from_attributes = True


class UploadResult(BaseModel):
    """Outcome of a successful CSV upload."""
    status: str = "ok"
    count: int = Field(..., ge=0, description="Number of properties ingested")
    generation: int = Field(..., ge=1, description="Store generation now being served")


class IngestErrorResponse(BaseModel):
    """Body returned when an upload is rejected."""
    error: str
    detail: str
    row: Optional[int] = Field(None, description="1-based data row that failed")
    line: Optional[int] = Field(None, description="1-based line in the uploaded file")


class HealthCheck(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    property_count: int
    generation: int
    loaded_at: Optional[datetime] = None
    timestamp: datetime
