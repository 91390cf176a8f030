# tests/conftest.py
from __future__ import annotations
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import httpx
import pytest

from genmed.domain.errors import UpstreamTransportError
from genmed.domain.models import PlannerStep
from genmed.domain.ports import GroundingPort, ReasoningPort
from genmed.infra.rxnav.rxnav_adapter import RxNavAdapter

RXNAV = "https://rxnav.test/REST"

LIPITOR_SEARCH = {
    "drugGroup": {
        "name": "Lipitor 20mg",
        "conceptGroup": [
            {"tty": "BPCK"},
            {"tty": "IN", "conceptProperties": [{"rxcui": "83367", "name": "atorvastatin", "tty": "IN"}]},
            {"tty": "SCD", "conceptProperties": [
                {"rxcui": "617310", "name": "atorvastatin 20 MG Oral Tablet", "tty": "SCD"},
            ]},
            {"tty": "SBD", "conceptProperties": [
                {"rxcui": "617318", "name": "atorvastatin 20 MG Oral Tablet [Lipitor]", "tty": "SBD"},
                {"rxcui": "617320", "name": "atorvastatin 40 MG Oral Tablet [Lipitor]", "tty": "SBD"},
            ]},
        ],
    }
}

LIPITOR_RELATED = {
    "allRelatedGroup": {
        "rxcui": "617310",
        "conceptGroup": [
            {"tty": "IN", "conceptProperties": [{"rxcui": "83367", "name": "atorvastatin"}]},
            {"tty": "BN", "conceptProperties": [
                {"rxcui": "153165", "name": "Lipitor"},
                {"rxcui": "1", "name": "Atorva"},
                {"rxcui": "2", "name": "Storvas"},
                {"rxcui": "3", "name": "Tonact"},
                {"rxcui": "4", "name": "Atocor"},
                {"rxcui": "5", "name": "Aztor"},
                {"rxcui": "6", "name": "Lipvas"},
            ]},
            {"tty": "SCD", "conceptProperties": [{"rxcui": "617310", "name": "atorvastatin 20 MG Oral Tablet"}]},
            {"tty": "SBD", "conceptProperties": [
                {"rxcui": "617318", "name": "atorvastatin 20 MG Oral Tablet [Lipitor]"},
            ]},
            {"tty": "DF", "conceptProperties": [{"rxcui": "317541", "name": "Oral Tablet"}]},
        ],
    }
}

RUPEE_TEXT = (
    "Lipitor 20mg (10 tablets) costs about ₹270 on 1mg. Generic atorvastatin 20mg: "
    "Atorva 20 ₹180 (Apollo), Storvas 20 ₹150 (1mg), Jan Aushadhi atorvastatin 20mg ₹20 per strip."
)

GROUNDING_META = SimpleNamespace(
    grounding_chunks=[
        SimpleNamespace(web=SimpleNamespace(title="1mg.com", uri="https://www.1mg.com/drugs/lipitor-20mg")),
        SimpleNamespace(web=None),
        SimpleNamespace(web=SimpleNamespace(title="apollopharmacy.in", uri="https://www.apollopharmacy.in/atorva")),
        SimpleNamespace(web=SimpleNamespace(title="janaushadhi.gov.in", uri="https://janaushadhi.gov.in/")),
        SimpleNamespace(web=SimpleNamespace(title="pharmeasy.in", uri="https://pharmeasy.in/storvas")),
        SimpleNamespace(web=SimpleNamespace(title="netmeds.com", uri="https://www.netmeds.com/atorvastatin")),
        SimpleNamespace(web=SimpleNamespace(title="medplusmart.com", uri="https://www.medplusmart.com/atorva")),
    ],
    web_search_queries=["Lipitor 20mg price India", "atorvastatin 20mg generic price 1mg"],
)


class RxNavStub:
    """httpx.MockTransport handler serving canned RxNav bodies; records every request."""
    def __init__(self, search: Any = None, related: Optional[Dict[str, Any]] = None,
                 status: int = 200, raise_exc: Optional[Exception] = None):
        self.search = search if search is not None else {"drugGroup": {"name": None}}
        self.related = related or {}
        self.status = status
        self.raise_exc = raise_exc
        self.calls: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.raise_exc is not None:
            raise self.raise_exc
        if self.status != 200:
            return httpx.Response(self.status, json={"error": "boom"})
        path = request.url.path
        if path.endswith("/drugs.json"):
            return httpx.Response(200, json=self.search)
        if path.endswith("/allrelated.json"):
            rxcui = path.split("/")[-2]
            return httpx.Response(200, json=self.related.get(rxcui, {"allRelatedGroup": {"rxcui": rxcui}}))
        return httpx.Response(404)

    def adapter(self) -> RxNavAdapter:
        client = httpx.AsyncClient(transport=httpx.MockTransport(self))
        return RxNavAdapter(base_url=RXNAV, timeout=5.0, client=client)


class FakeGrounding(GroundingPort):
    def __init__(self, text: str = RUPEE_TEXT, metadata: Any = GROUNDING_META, error: Optional[str] = None):
        self.text = text
        self.metadata = metadata
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> Dict[str, Any]:
        self.prompts.append(prompt)
        if self.error:
            raise UpstreamTransportError(self.error)
        return {"text": self.text, "grounding_metadata": self.metadata, "model": "fake-gemini"}


class ScriptedPlanner(ReasoningPort):
    """Replays canned steps; a callable step gets the message list so it can read tool results."""
    def __init__(self, steps: List[Any]):
        self.steps = list(steps)
        self.requests: List[Dict[str, Any]] = []

    async def next_step(self, messages, tools=None) -> PlannerStep:
        self.requests.append({"messages": [dict(m) for m in messages], "tools": tools})
        step = self.steps.pop(0) if self.steps else PlannerStep(content="")
        if callable(step):
            step = step(messages)
        return step


def last_tool_payload(messages: List[Dict[str, Any]]) -> Dict[str, Any]:
    for m in reversed(messages):
        if m.get("role") == "tool":
            return json.loads(m["content"])
    raise AssertionError("no tool message")


@pytest.fixture
def lipitor_rxnav() -> RxNavStub:
    return RxNavStub(search=LIPITOR_SEARCH, related={"617310": LIPITOR_RELATED})


@pytest.fixture
def grounding() -> FakeGrounding:
    return FakeGrounding()
