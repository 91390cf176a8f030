# genmed/services/vocabulary_resolver.py
from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from genmed.domain.errors import UpstreamError
from genmed.domain.models import (
    MAX_BRAND_NAMES,
    ConceptGroup,
    ConceptType,
    LookupFailure,
    ResolvedMedicineInfo,
    VocabularyConcept,
    type_description,
)
from genmed.domain.ports import VocabularyPort

logger = logging.getLogger("genmed.rxnav")

IN = ConceptType.INGREDIENT.value
SCD = ConceptType.GENERIC_FORMULATION.value
SBD = ConceptType.BRANDED_FORMULATION.value
BN = ConceptType.BRAND_NAME.value
DF = ConceptType.DOSE_FORM.value

NAME_SUGGESTION = "Common generic names: Paracetamol=Acetaminophen, Ibuprofen, Aspirin, Metformin, Omeprazole"
SAVINGS_MESSAGE = (
    "Generic medicines contain the EXACT SAME active ingredient in the EXACT SAME dosage as branded "
    "medicines. They are equally safe and effective but cost much less!"
)
DETAILS_RECOMMENDATION = (
    "The GENERIC option (SCD type) has the same active ingredient and dosage as branded versions "
    "but typically costs much less."
)
SEARCH_LIMIT = 10


def first_of(groups: Iterable[ConceptGroup], tty: str) -> Optional[VocabularyConcept]:
    """First concept of the first non-empty group with this tty. Upstream order, no ranking."""
    for g in groups:
        if g.tty == tty and g.concepts:
            return g.concepts[0]
    return None


def names_of(groups: Iterable[ConceptGroup], *ttys: str, limit: int | None = None) -> List[str]:
    out: List[str] = []
    for tty in ttys:
        for g in groups:
            if g.tty != tty:
                continue
            for c in g.concepts:
                if c.name and c.name not in out:
                    out.append(c.name)
    return out[:limit] if limit is not None else out


def _brand_label(branded_name: str) -> str:
    # "atorvastatin 20 MG Oral Tablet [Lipitor]" -> "Lipitor"
    if "[" in branded_name:
        label = branded_name.split("[", 1)[1].replace("]", "").strip()
        if label:
            return label
    return branded_name


def _failure(e: UpstreamError) -> LookupFailure:
    return LookupFailure(kind=e.kind, message=str(e) or e.__class__.__name__)


class VocabularyResolver:
    def __init__(self, vocab: VocabularyPort):
        self.vocab = vocab

    async def resolve(self, medicine_name: str) -> Union[ResolvedMedicineInfo, LookupFailure]:
        try:
            groups = await self.vocab.search_drugs(medicine_name)
            if not groups:
                return LookupFailure(
                    kind="not_found",
                    message=(
                        f'Could not find medicine "{medicine_name}". '
                        "Please check the spelling or try the generic name."
                    ),
                    suggestion=NAME_SUGGESTION,
                )

            ingredient = first_of(groups, IN)
            generic = first_of(groups, SCD)
            branded = first_of(groups, SBD)

            info = ResolvedMedicineInfo(
                active_ingredient=ingredient.name if ingredient else None,
                generic_name=generic.name if generic else None,
                brand_names=names_of(groups, BN, SBD, limit=MAX_BRAND_NAMES),
            )

            target = generic or branded
            if target is None:
                if ingredient is None:
                    return LookupFailure(
                        kind="not_found",
                        message="Could not identify a specific drug formulation. Please provide more details like dosage.",
                        suggestion=NAME_SUGGESTION,
                    )
                return info

            related = await self.vocab.all_related(target.rxcui) or []
        except UpstreamError as e:
            logger.warning("⚠️ RxNav lookup failed for %r: %s", medicine_name, e)
            return _failure(e)

        r_ingredient = first_of(related, IN)
        r_generic = first_of(related, SCD)
        r_dose_form = first_of(related, DF)
        r_brands = names_of(related, BN, limit=MAX_BRAND_NAMES)

        return ResolvedMedicineInfo(
            active_ingredient=r_ingredient.name if r_ingredient else info.active_ingredient,
            generic_name=r_generic.name if r_generic else info.generic_name,
            brand_names=r_brands or info.brand_names,
            dosage_form=r_dose_form.name if r_dose_form else None,
        )

    # ==== Granular lookups (fallback tools) ====

    async def search(self, medicine_name: str) -> Dict[str, Any]:
        try:
            groups = await self.vocab.search_drugs(medicine_name)
        except UpstreamError as e:
            return _failure(e).to_payload()
        if not groups:
            return {
                "success": False,
                "message": (
                    f'Could not find medicine "{medicine_name}". '
                    "Please check the spelling or try the generic name."
                ),
                "suggestion": NAME_SUGGESTION,
            }

        results = [
            {
                "rxcui": c.rxcui,
                "name": c.name,
                "type": g.tty,
                "typeDescription": type_description(g.tty),
            }
            for g in groups
            for c in g.concepts
        ]
        return {
            "success": True,
            "searchTerm": medicine_name,
            "results": results[:SEARCH_LIMIT],
            "totalFound": len(results),
        }

    async def details(self, rxcui: str) -> Dict[str, Any]:
        rxcui = str(rxcui).strip()
        if not (rxcui.isascii() and rxcui.isdigit()):
            return LookupFailure(
                kind="not_found",
                message=f"'{rxcui}' is not a valid RxNorm rxcui (expected digits only).",
            ).to_payload()
        try:
            related = await self.vocab.all_related(rxcui)
        except UpstreamError as e:
            return _failure(e).to_payload()
        if not related:
            return {"success": False, "message": "Could not find detailed information for this medicine."}

        def pairs(tty: str, kind: str | None = None) -> List[Dict[str, str]]:
            out = []
            for g in related:
                if g.tty == tty:
                    for c in g.concepts:
                        item = {"name": c.name, "rxcui": c.rxcui}
                        if kind:
                            item["type"] = kind
                        out.append(item)
            return out

        data = {
            "rxcui": rxcui,
            "ingredient": pairs(IN) or None,
            "genericDrug": pairs(SCD, "GENERIC") or None,
            "brandNames": pairs(BN),
            "brandedDrugs": pairs(SBD, "BRANDED"),
            "dosageForm": names_of(related, DF) or None,
        }
        return {"success": True, "data": data, "recommendation": DETAILS_RECOMMENDATION}

    async def generic_equivalent(self, brand_name: str) -> Dict[str, Any]:
        try:
            groups = await self.vocab.search_drugs(brand_name)
            if not groups:
                return {
                    "success": False,
                    "message": f'Could not find "{brand_name}". Try searching with just the medicine name without dosage.',
                }

            target = None
            for g in groups:
                if g.tty in (SCD, SBD) and g.concepts:
                    target = g.concepts[0]
                    break
            if target is None:
                return {
                    "success": False,
                    "message": "Could not identify a specific drug formulation. Please provide more details like dosage.",
                }

            related = await self.vocab.all_related(target.rxcui) or []
        except UpstreamError as e:
            return _failure(e).to_payload()

        ingredients = names_of(related, IN)
        generics = [{"name": c.name, "rxcui": c.rxcui} for g in related if g.tty == SCD for c in g.concepts]
        brandeds = [{"name": c.name, "rxcui": c.rxcui} for g in related if g.tty == SBD for c in g.concepts]

        result: Dict[str, Any] = {
            "searchedFor": brand_name,
            "identifiedAs": target.name,
            "activeIngredient": ", ".join(ingredients) or None,
            "genericVersion": generics or None,
            "brandedVersions": brandeds,
            "recommendation": None,
        }
        if generics:
            result["recommendation"] = {
                "buyThis": generics[0]["name"],
                "activeIngredient": result["activeIngredient"],
                "avoidTheseBrands": [_brand_label(b["name"]) for b in brandeds],
                "savingsMessage": SAVINGS_MESSAGE,
            }
        return {"success": True, "data": result}

    async def dosages(self, ingredient_name: str) -> Dict[str, Any]:
        try:
            groups = await self.vocab.search_drugs(ingredient_name)
        except UpstreamError as e:
            return _failure(e).to_payload()
        if not groups:
            return {"success": False, "message": f'Could not find dosages for "{ingredient_name}".'}

        # single-ingredient generic formulations only
        formulations = [
            {"name": c.name, "rxcui": c.rxcui}
            for g in groups if g.tty == SCD
            for c in g.concepts if " / " not in c.name
        ]
        return {
            "success": True,
            "ingredient": ingredient_name,
            "availableGenericFormulations": formulations,
            "note": "These are pure generic formulations without combination drugs. Ask your doctor which dosage is right for you.",
        }
