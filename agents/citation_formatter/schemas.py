"""
Pydantic schemas for the format endpoint
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class FormatRequest(BaseModel):
    """Body of POST /format"""
    items: Optional[Dict[str, Any]] = Field(None, description="CSL-JSON items keyed by identifier")
    style: Optional[str] = Field(None, description="CSL style document (XML text)")
    locale: Optional[str] = Field(None, description="Locale tag, defaults to en-US")


class FormatResponse(BaseModel):
    html: str = Field(..., description="Rendered bibliography HTML")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Failure message")
    code: str = Field(..., description="Failure classification")


class HealthResponse(BaseModel):
    ok: bool = True
