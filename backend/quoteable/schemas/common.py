"""
So Quoteable Backend — Shared Response Schemas
===============================================

What:  Error and health response models used by every router.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Opacity must be between 0 and 100",
            "details": {"field": "opacity", "value": 120},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    people_count: Optional[int] = Field(
        default=None,
        description="Rows in the people table (null when the database is unreachable)",
    )
    cloudinary: str = Field(description="Cloudinary status: configured, unconfigured, circuit_open")
    uptime_seconds: float = Field(description="Seconds since service started")


class DeletedResponse(BaseModel):
    id: uuid.UUID = Field(description="ID of the removed record")
