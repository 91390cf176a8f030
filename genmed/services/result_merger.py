# genmed/services/result_merger.py
from __future__ import annotations
import logging

from genmed.domain.models import CombinedFinding, LookupFailure, PriceSearchError
from genmed.services.price_grounding import PriceGroundingClient
from genmed.services.vocabulary_resolver import VocabularyResolver

logger = logging.getLogger("genmed.agent")


class ResultMerger:
    """
    Backs the primary tool: RxNav lookup first, then the Indian price search.
    Neither step can skip the other; each failure only degrades its own field.
    """
    def __init__(self, resolver: VocabularyResolver, prices: PriceGroundingClient):
        self.resolver = resolver
        self.prices = prices

    async def combine(self, medicine_name: str) -> CombinedFinding:
        finding = CombinedFinding(query=medicine_name)

        logger.info("🔍 [FAST] Searching RxNav for %r", medicine_name)
        resolved = await self.resolver.resolve(medicine_name)
        if isinstance(resolved, LookupFailure):
            logger.info("⚠️ RxNav gave no data (%s), continuing with web search: %s", resolved.kind, resolved.message)
        else:
            finding.api_data = resolved
            logger.info("✅ [FAST] RxNav completed ingredient=%s", resolved.active_ingredient)

        logger.info("🇮🇳 [SEARCH] Getting Indian prices via grounded search")
        ingredient = finding.api_data.active_ingredient if finding.api_data else None
        finding.indian_prices = await self.prices.find_indian_prices(medicine_name, ingredient)
        if isinstance(finding.indian_prices, PriceSearchError):
            logger.info("⚠️ [SEARCH] Indian prices unavailable: %s", finding.indian_prices.error)
        else:
            logger.info("✅ [SEARCH] Indian prices retrieved (%d sources)", len(finding.indian_prices.sources))

        return finding
