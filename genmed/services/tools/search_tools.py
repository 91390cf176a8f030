# genmed/services/tools/search_tools.py
from __future__ import annotations
import logging
from typing import Any, Dict

from pydantic import BaseModel, Field

from genmed.services.price_grounding import PriceGroundingClient
from genmed.services.result_merger import ResultMerger
from genmed.services.tools.base import AgentTool

logger = logging.getLogger("genmed.agent")


class PrimaryParams(BaseModel):
    medicineName: str = Field(..., description="Name of the medicine (brand or generic) with dosage if known")


class WebSearchParams(BaseModel):
    searchQuery: str = Field(
        ...,
        description="The search query about medicine (e.g., 'generic paracetamol 500mg price India', 'where to buy cheap ibuprofen')",
    )


class IndiaParams(BaseModel):
    medicineName: str = Field(..., description="Name of the medicine to search for in India")


class FindGenericWithPricesTool(AgentTool):
    name = "find_generic_with_prices"
    description = (
        "PRIMARY TOOL - Find generic alternatives with Indian prices. Combines fast RxNav API lookup "
        "with Google Search for Indian market prices from 1mg, Apollo, Jan Aushadhi. "
        "Use this tool FIRST for any medicine query."
    )
    Params = PrimaryParams

    def __init__(self, merger: ResultMerger):
        self.merger = merger

    async def run(self, params: PrimaryParams) -> Dict[str, Any]:
        finding = await self.merger.combine(params.medicineName)
        return finding.to_payload()


class WebSearchMedicineTool(AgentTool):
    name = "web_search_medicine"
    description = (
        "Search the web for real-time information about medicine prices, availability, generic alternatives "
        "in India, and latest medical information. Use this for current pricing, where to buy, and "
        "region-specific medicine information."
    )
    Params = WebSearchParams

    def __init__(self, prices: PriceGroundingClient):
        self.prices = prices

    async def run(self, params: WebSearchParams) -> Dict[str, Any]:
        logger.info("🌐 Web search (grounded): %s", params.searchQuery)
        return await self.prices.web_search(params.searchQuery)


class SearchIndiaMedicineTool(AgentTool):
    name = "search_india_medicine"
    description = (
        "Search for medicine information specific to India - prices, generic alternatives available in India, "
        "Jan Aushadhi stores, and Indian pharmacy options. Always includes price information."
    )
    Params = IndiaParams

    def __init__(self, prices: PriceGroundingClient):
        self.prices = prices

    async def run(self, params: IndiaParams) -> Dict[str, Any]:
        logger.info("🇮🇳 Searching India medicine info: %s", params.medicineName)
        return await self.prices.india_search(params.medicineName)
