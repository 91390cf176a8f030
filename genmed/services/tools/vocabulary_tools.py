# genmed/services/tools/vocabulary_tools.py
from __future__ import annotations
import logging
from typing import Any, Dict

from pydantic import BaseModel, Field

from genmed.services.tools.base import AgentTool
from genmed.services.vocabulary_resolver import VocabularyResolver

logger = logging.getLogger("genmed.agent")


class MedicineNameParams(BaseModel):
    medicineName: str = Field(..., description="Name of the medicine (can be brand name like 'Tylenol' or generic like 'Paracetamol')")


class RxcuiParams(BaseModel):
    rxcui: str = Field(..., description="The RxCUI identifier of the medicine")


class BrandNameParams(BaseModel):
    brandName: str = Field(..., description="The brand name of the medicine (e.g., 'Tylenol 500mg')")


class IngredientParams(BaseModel):
    ingredientName: str = Field(..., description="The generic ingredient name (e.g., 'acetaminophen', 'ibuprofen')")


class _VocabularyTool(AgentTool):
    def __init__(self, resolver: VocabularyResolver):
        self.resolver = resolver


class SearchMedicineTool(_VocabularyTool):
    name = "search_medicine"
    description = "Search for a medicine by name (brand or generic) to get its identifier and basic information"
    Params = MedicineNameParams

    async def run(self, params: MedicineNameParams) -> Dict[str, Any]:
        logger.info("🔍 Searching for medicine: %s", params.medicineName)
        return await self.resolver.search(params.medicineName)


class MedicineDetailsTool(_VocabularyTool):
    name = "get_medicine_details"
    description = (
        "Get detailed information about a specific medicine using its RxCUI, "
        "including generic and brand alternatives"
    )
    Params = RxcuiParams

    async def run(self, params: RxcuiParams) -> Dict[str, Any]:
        logger.info("📋 Getting details for RxCUI: %s", params.rxcui)
        return await self.resolver.details(params.rxcui)


class GenericEquivalentTool(_VocabularyTool):
    name = "find_generic_equivalent"
    description = "Find the generic equivalent of a branded medicine - this is the main tool for cost savings"
    Params = BrandNameParams

    async def run(self, params: BrandNameParams) -> Dict[str, Any]:
        logger.info("💊 Finding generic equivalent for: %s", params.brandName)
        return await self.resolver.generic_equivalent(params.brandName)


class AvailableDosagesTool(_VocabularyTool):
    name = "get_available_dosages"
    description = "Get all available dosages and forms of a medicine ingredient"
    Params = IngredientParams

    async def run(self, params: IngredientParams) -> Dict[str, Any]:
        logger.info("📊 Getting available dosages for: %s", params.ingredientName)
        return await self.resolver.dosages(params.ingredientName)
