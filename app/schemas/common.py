"""
Quai Antique API — Shared Schemas
===================================

What:  Base model with the API's camelCase wire convention, plus the error
       and health response shapes shared by every route module.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for every request/response schema.

    Python attributes are snake_case; JSON keys are camelCase
    (first_name ↔ firstName). Both spellings are accepted on input.
    Unknown input keys are ignored, so a write projection can never be used
    to smuggle in fields it does not declare.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
        "extra": "ignore",
    }


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "duplicate_identity",
            "message": "An account with this email already exists",
            "details": {"field": "email"},
            "request_id": "9f86d081884c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
