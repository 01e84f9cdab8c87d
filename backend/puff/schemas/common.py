"""
Puff Backend: Shared Response Schemas
=====================================

What:  Error, health and catalog response models used across routers.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description for display to users
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "not_found",
            "message": "strain with ID '...' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


class CatalogResponse(BaseModel):
    """Every fixed vocabulary the client needs to render pickers."""
    strain_types: Dict[str, Dict[str, str]]
    methods: Dict[str, Dict[str, str]]
    effects: List[str]
    moods: Dict[int, str]
    vibes: List[dict]
    symptoms: List[Dict[str, str]]
    break_durations: List[int]
    benefits_timeline: List[Dict[str, Any]]
    coping_tips: List[str]


def clean_optional_text(value: Optional[str]) -> Optional[str]:
    """Trim free text; blank strings are stored as NULL."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def reject_null(value, field_name: str):
    """
    Explicit nulls in PATCH bodies are only allowed for nullable columns.

    Pydantic runs field validators on values the client sent, not on
    defaults, so an omitted field never reaches this check.
    """
    if value is None:
        raise ValueError(f"{field_name} cannot be null")
    return value
