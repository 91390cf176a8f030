# genmed/presentation/schemas.py
from __future__ import annotations
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    query: Optional[str] = Field(None, description="Medicine name or free-text question, e.g. 'Lipitor 20mg'")


class SearchResponse(BaseModel):
    success: bool = True
    result: Dict[str, Any]


class SearchFailure(BaseModel):
    success: bool = False
    error: str


class BadRequest(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
    message: str = "Generic Medicine Finder API is running"
