# genmed/domain/ports.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from genmed.domain.models import ConceptGroup, PlannerStep


class VocabularyPort(ABC):
    """Drug-vocabulary lookups (RxNav). Adapters raise UpstreamError on failure."""

    @abstractmethod
    async def search_drugs(self, name: str) -> Optional[List[ConceptGroup]]:
        """None when the service returned no concept group for the name."""

    @abstractmethod
    async def all_related(self, rxcui: str) -> Optional[List[ConceptGroup]]: ...


class GroundingPort(ABC):
    """Search-grounded text generation. Returns {"text", "grounding_metadata"}."""

    @abstractmethod
    async def generate(self, prompt: str) -> Dict[str, Any]: ...


class ReasoningPort(ABC):
    """Tool-calling completion backend used by the agent for its own decisions."""

    @abstractmethod
    async def next_step(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> PlannerStep: ...
