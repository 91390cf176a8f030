# genmed/services/price_grounding.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Union

from genmed.domain.errors import UpstreamError
from genmed.domain.models import MAX_PRICE_SOURCES, PriceSearchError, PriceSearchResult, PriceSource
from genmed.domain.ports import GroundingPort
from genmed.services.prompt_service import PromptService

logger = logging.getLogger("genmed.grounding")

INDIA_TIP = (
    "Visit your nearest Jan Aushadhi Kendra for the cheapest generic medicines. "
    "Find stores at: janaushadhi.gov.in"
)


def _field(obj: Any, *names: str) -> Any:
    """Read a field from an SDK object or a plain dict (snake_case or camelCase)."""
    if obj is None:
        return None
    for n in names:
        val = obj.get(n) if isinstance(obj, dict) else getattr(obj, n, None)
        if val is not None:
            return val
    return None


def _text(val: Any) -> Optional[str]:
    return None if val is None else str(val)


def _items(val: Any) -> List[Any]:
    # metadata lists arrive as list/tuple; anything else carries no citations
    return list(val) if isinstance(val, (list, tuple)) else []


def extract_citations(metadata: Any, limit: Optional[int] = MAX_PRICE_SOURCES) -> List[PriceSource]:
    """Web chunks of grounding metadata as {title, url}, upstream order, non-web chunks dropped."""
    chunks = _items(_field(metadata, "grounding_chunks", "groundingChunks"))
    sources: List[PriceSource] = []
    for chunk in chunks:
        web = _field(chunk, "web")
        if web is None:
            continue
        sources.append(PriceSource(title=_text(_field(web, "title")), url=_text(_field(web, "uri", "url"))))
        if limit is not None and len(sources) >= limit:
            break
    return sources


def extract_search_queries(metadata: Any) -> List[str]:
    return [str(q) for q in _items(_field(metadata, "web_search_queries", "webSearchQueries"))]


class PriceGroundingClient:
    def __init__(self, llm: GroundingPort, prompts: PromptService | None = None):
        self.llm = llm
        self.prompts = prompts or PromptService()

    async def find_indian_prices(
        self, medicine_name: str, active_ingredient: Optional[str] = None
    ) -> Union[PriceSearchResult, PriceSearchError]:
        prompt = self.prompts.price_prompt(medicine_name, active_ingredient)
        try:
            out = await self.llm.generate(prompt)
        except UpstreamError as e:
            logger.warning("⚠️ Price search failed for %r: %s", medicine_name, e)
            return PriceSearchError(error=str(e) or e.__class__.__name__)

        meta = out.get("grounding_metadata")
        return PriceSearchResult(
            data=_text(out.get("text")) or "",
            sources=extract_citations(meta),
            search_queries=extract_search_queries(meta),
        )

    async def web_search(self, search_query: str) -> Dict[str, Any]:
        try:
            out = await self.llm.generate(self.prompts.web_search_prompt(search_query))
        except UpstreamError as e:
            logger.warning("⚠️ Web search failed for %r: %s", search_query, e)
            return {
                "success": False,
                "error": str(e),
                "suggestion": "Try rephrasing your search query or check your internet connection.",
            }
        meta = out.get("grounding_metadata")
        return {
            "success": True,
            "searchQuery": search_query,
            "result": _text(out.get("text")) or "",
            "sources": [s.model_dump() for s in extract_citations(meta, limit=None)],
            "searchQueries": extract_search_queries(meta),
        }

    async def india_search(self, medicine_name: str) -> Dict[str, Any]:
        try:
            out = await self.llm.generate(self.prompts.india_prompt(medicine_name))
        except UpstreamError as e:
            logger.warning("⚠️ India medicine search failed for %r: %s", medicine_name, e)
            return {"success": False, "error": str(e)}
        meta = out.get("grounding_metadata")
        return {
            "success": True,
            "medicine": medicine_name,
            "country": "India",
            "result": _text(out.get("text")) or "",
            "sources": [s.model_dump() for s in extract_citations(meta)],
            "tip": INDIA_TIP,
        }
