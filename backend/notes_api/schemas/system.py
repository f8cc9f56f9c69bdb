"""
Notes API: Health, Diagnostic and Error Schemas
===============================================

What:  Response models for /health and /db-check, plus the error bodies
       rendered by the global exception handlers (documented in OpenAPI).
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    What:  Liveness response. Does not probe the database or the upstream.
    """
    ok: bool = Field(default=True, description="Always true while the process serves")
    time: datetime = Field(description="Current server time (UTC ISO 8601)")


class DbCheckResponse(BaseModel):
    """
    What:  Result of the diagnostic round-trip, e.g. {"db": {"ok": 1}}.
    """
    db: Dict[str, int] = Field(description="Row returned by SELECT 1 AS ok")


class ErrorResponse(BaseModel):
    """
    What:  Error body used by every failing endpoint.

    Example:
        {"error": "Failed to fetch notes"}
    """
    error: str = Field(description="Human-readable error summary")


class DiagnosticErrorResponse(ErrorResponse):
    """
    What:  Error body of /db-check, which also exposes driver detail.

    Example:
        {"error": "DB connection failed", "message": "...", "code": "28P01"}
    """
    message: str = Field(description="Driver error message")
    code: Optional[str] = Field(default=None, description="Driver error code")
