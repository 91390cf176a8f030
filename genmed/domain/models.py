# genmed/domain/models.py
from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

MAX_BRAND_NAMES = 5
MAX_PRICE_SOURCES = 5

JAN_AUSHADHI_TIP = (
    "Jan Aushadhi Kendras offer the cheapest generic medicines. "
    "Find stores at janaushadhi.gov.in or call 1800-180-8080"
)


class ConceptType(str, Enum):
    """RxNorm term types (tty) the resolver cares about."""
    INGREDIENT = "IN"
    MULTI_INGREDIENT = "MIN"
    GENERIC_FORMULATION = "SCD"
    BRANDED_FORMULATION = "SBD"
    BRAND_NAME = "BN"
    DOSE_FORM = "DF"
    GENERIC_COMPONENT = "SCDC"
    BRANDED_COMPONENT = "SBDC"


TYPE_DESCRIPTIONS: Dict[str, str] = {
    "SCD": "Generic Drug (Recommended - Same quality, lower cost)",
    "SBD": "Branded Drug (More expensive)",
    "BN": "Brand Name",
    "IN": "Active Ingredient",
    "MIN": "Multiple Ingredients",
    "DF": "Dosage Form",
    "SCDC": "Generic Drug Component",
    "SBDC": "Branded Drug Component",
}


def type_description(tty: str | None) -> str:
    return TYPE_DESCRIPTIONS.get(tty or "", tty or "")


class VocabularyConcept(BaseModel):
    rxcui: str
    name: str
    tty: Optional[str] = None


class ConceptGroup(BaseModel):
    tty: Optional[str] = None
    concepts: List[VocabularyConcept] = Field(default_factory=list)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ResolvedMedicineInfo(_CamelModel):
    active_ingredient: Optional[str] = Field(None, alias="activeIngredient")
    generic_name: Optional[str] = Field(None, alias="genericName")
    brand_names: List[str] = Field(default_factory=list, alias="brandNames", max_length=MAX_BRAND_NAMES)
    dosage_form: Optional[str] = Field(None, alias="dosageForm")


class LookupFailure(BaseModel):
    """Failure marker returned (never raised) by lookups against upstream services."""
    kind: Literal["not_found", "transport", "malformed"]
    message: str
    suggestion: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        key = "message" if self.kind == "not_found" else "error"
        out: Dict[str, Any] = {"success": False, key: self.message}
        if self.suggestion:
            out["suggestion"] = self.suggestion
        return out


class PriceSource(BaseModel):
    title: Optional[str] = None
    url: Optional[str] = None


class PriceSearchResult(_CamelModel):
    data: str = ""
    sources: List[PriceSource] = Field(default_factory=list)
    search_queries: List[str] = Field(default_factory=list, alias="searchQueries")


class PriceSearchError(BaseModel):
    error: str

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()


class CombinedFinding(BaseModel):
    query: str
    api_data: Optional[ResolvedMedicineInfo] = None
    indian_prices: Optional[Union[PriceSearchResult, PriceSearchError]] = None
    tip: str = JAN_AUSHADHI_TIP

    def to_payload(self) -> Dict[str, Any]:
        return {
            "success": True,
            "medicine": self.query,
            "apiData": self.api_data.to_payload() if self.api_data else None,
            "indianPrices": self.indian_prices.to_payload() if self.indian_prices else None,
            "tip": self.tip,
        }


# ── Reasoning backend (planner) ──────────────────────────────────

class ToolCall(BaseModel):
    id: str
    name: str
    arguments: str = "{}"


class PlannerStep(BaseModel):
    content: Optional[str] = None
    tool_calls: List[ToolCall] = Field(default_factory=list)
    model: Optional[str] = None

    @property
    def is_final(self) -> bool:
        return not self.tool_calls
