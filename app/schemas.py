"""
Pydantic schemas for API responses.
"""
from typing import Optional, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


# === Person Schemas ===

class PersonOut(BaseModel):
    """Output schema for a person record."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    age: int
    created_at: str = Field(serialization_alias="createdAt")


class PersonListOut(BaseModel):
    """All person records in display order."""
    items: list[PersonOut]
    total: int


# === Health Check Schemas ===

class HealthStatus(BaseModel):
    """System health status."""
    status: str  # ok, degraded, unhealthy
    service: str
    timestamp: datetime

    database: dict[str, Any]
    records: int
    load_error: Optional[str] = None


# === Error Schemas ===

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    code: Optional[str] = None
