# genmed/presentation/routers.py
from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from genmed.container import get_agent_orchestrator
from genmed.presentation.schemas import BadRequest, HealthResponse, SearchFailure, SearchRequest, SearchResponse
from genmed.services.agent_orchestrator import AgentOrchestrator

logger = logging.getLogger(__name__)

SEARCH_FAILED = "Failed to process your request. Please try again."


def _preview(s: str | None, n: int = 200) -> str:
    s = (s or "").strip()
    return s if len(s) <= n else s[:n] + "…"


router = APIRouter()


@router.post(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": BadRequest}, 500: {"model": SearchFailure}},
)
async def search_generic(
    payload: Any = Body(None, description="JSON object with a `query` string, e.g. {\"query\": \"Lipitor 20mg\"}"),
    orchestrator: AgentOrchestrator = Depends(get_agent_orchestrator),
):
    # any body that is not {"query": "<text>"} is the same client error as a missing query
    try:
        req = SearchRequest.model_validate(payload or {})
    except ValidationError:
        req = SearchRequest()
    query = req.query or ""
    if not query.strip():
        return JSONResponse(status_code=400, content={"error": "Query is required"})

    t0 = time.monotonic()
    logger.info('📥 Received query: "%s"', _preview(query))
    try:
        result = await orchestrator.handle(query)
    except Exception:
        logger.exception('❌ Search failed for "%s" after %d ms', _preview(query), int((time.monotonic() - t0) * 1000))
        return JSONResponse(status_code=500, content={"success": False, "error": SEARCH_FAILED})

    logger.info('📤 Sending response for: "%s" (%d ms)', _preview(query), int((time.monotonic() - t0) * 1000))
    return SearchResponse(result=result)


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse()
