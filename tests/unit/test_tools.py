import asyncio
import json

from conftest import FakeGrounding, RxNavStub
from genmed.services.price_grounding import PriceGroundingClient
from genmed.services.tools.registry import build_default_registry
from genmed.services.vocabulary_resolver import VocabularyResolver


def _registry(rxnav: RxNavStub, llm: FakeGrounding):
    return build_default_registry(VocabularyResolver(rxnav.adapter()), PriceGroundingClient(llm))


def test_registry_exposes_seven_tools_primary_first(lipitor_rxnav, grounding):
    reg = _registry(lipitor_rxnav, grounding)
    assert reg.names() == [
        "find_generic_with_prices",
        "search_medicine",
        "get_medicine_details",
        "find_generic_equivalent",
        "get_available_dosages",
        "web_search_medicine",
        "search_india_medicine",
    ]


def test_definitions_are_openai_function_schemas(lipitor_rxnav, grounding):
    defs = {d["function"]["name"]: d for d in _registry(lipitor_rxnav, grounding).definitions()}
    primary = defs["find_generic_with_prices"]
    assert primary["type"] == "function"
    assert primary["function"]["description"].startswith("PRIMARY TOOL")
    params = primary["function"]["parameters"]
    assert params["type"] == "object"
    assert params["required"] == ["medicineName"]
    assert defs["get_medicine_details"]["function"]["parameters"]["required"] == ["rxcui"]


def test_primary_tool_returns_combined_json(lipitor_rxnav, grounding):
    tool = _registry(lipitor_rxnav, grounding).get("find_generic_with_prices")
    out = json.loads(asyncio.run(tool.invoke('{"medicineName": "Lipitor 20mg"}')))
    assert out["apiData"]["activeIngredient"] == "atorvastatin"
    assert out["indianPrices"]["sources"]


def test_invalid_arguments_do_not_raise(lipitor_rxnav, grounding):
    tool = _registry(lipitor_rxnav, grounding).get("search_medicine")
    out = json.loads(asyncio.run(tool.invoke('{"wrong": 1}')))
    assert out["success"] is False
    assert "search_medicine" in out["error"]
    assert lipitor_rxnav.calls == []


def test_broken_json_arguments_do_not_raise(lipitor_rxnav, grounding):
    tool = _registry(lipitor_rxnav, grounding).get("get_available_dosages")
    out = json.loads(asyncio.run(tool.invoke("{not json")))
    assert out["success"] is False


def test_primary_tool_with_malformed_concept_still_has_prices(grounding):
    rxnav = RxNavStub(search={"drugGroup": {"conceptGroup": [
        {"tty": "SCD", "conceptProperties": [{"rxcui": "1", "name": 42}]},
    ]}})
    tool = _registry(rxnav, grounding).get("find_generic_with_prices")
    out = json.loads(asyncio.run(tool.invoke('{"medicineName": "Lipitor"}')))
    assert out["success"] is True
    assert out["apiData"] is None
    assert out["indianPrices"] is not None


def test_details_tool_with_non_numeric_rxcui(grounding):
    rxnav = RxNavStub()
    tool = _registry(rxnav, grounding).get("get_medicine_details")
    out = json.loads(asyncio.run(tool.invoke('{"rxcui": "1/../x"}')))
    assert out["success"] is False
    assert rxnav.calls == []
