# genmed/services/tools/registry.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from genmed.services.price_grounding import PriceGroundingClient
from genmed.services.result_merger import ResultMerger
from genmed.services.tools.base import AgentTool
from genmed.services.tools.search_tools import (
    FindGenericWithPricesTool,
    SearchIndiaMedicineTool,
    WebSearchMedicineTool,
)
from genmed.services.tools.vocabulary_tools import (
    AvailableDosagesTool,
    GenericEquivalentTool,
    MedicineDetailsTool,
    SearchMedicineTool,
)
from genmed.services.vocabulary_resolver import VocabularyResolver


class ToolRegistry:
    def __init__(self, tools: Iterable[AgentTool]):
        self._tools: Dict[str, AgentTool] = {}
        for t in tools:
            if t.name in self._tools:
                raise ValueError(f"duplicate tool name: {t.name}")
            self._tools[t.name] = t

    def names(self) -> List[str]:
        return list(self._tools)

    def get(self, name: str) -> Optional[AgentTool]:
        return self._tools.get(name)

    def definitions(self) -> List[Dict[str, Any]]:
        return [t.definition() for t in self._tools.values()]


def build_default_registry(
    resolver: VocabularyResolver, prices: PriceGroundingClient, merger: ResultMerger | None = None
) -> ToolRegistry:
    merger = merger or ResultMerger(resolver, prices)
    return ToolRegistry([
        FindGenericWithPricesTool(merger),  # primary
        SearchMedicineTool(resolver),
        MedicineDetailsTool(resolver),
        GenericEquivalentTool(resolver),
        AvailableDosagesTool(resolver),
        WebSearchMedicineTool(prices),
        SearchIndiaMedicineTool(prices),
    ])
