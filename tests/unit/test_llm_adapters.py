import asyncio
import json
from types import SimpleNamespace

import pytest

from conftest import GROUNDING_META
from genmed.domain.errors import BackendNotConfigured, UpstreamTransportError
from genmed.infra.llm.gemini_grounding import GeminiGroundingLlm
from genmed.infra.llm.openai_adapter import DEV_MODE_ANSWER, OpenAICompatLlm


class _FakeCompletions:
    def __init__(self, message):
        self.message = message
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return SimpleNamespace(choices=[SimpleNamespace(message=self.message)])


def _openai_client(message):
    completions = _FakeCompletions(message)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_openai_tool_calls_become_planner_step():
    msg = SimpleNamespace(content=None, tool_calls=[
        SimpleNamespace(id="call_9", function=SimpleNamespace(name="find_generic_with_prices",
                                                              arguments='{"medicineName": "Lipitor"}')),
    ])
    client, completions = _openai_client(msg)
    llm = OpenAICompatLlm(api_key="k", model="openai/gpt-oss-120b", client=client)
    tools = [{"type": "function", "function": {"name": "find_generic_with_prices"}}]

    step = asyncio.run(llm.next_step([{"role": "user", "content": "Lipitor"}], tools))

    assert not step.is_final
    assert step.tool_calls[0].name == "find_generic_with_prices"
    assert completions.kwargs["tool_choice"] == "auto"
    assert completions.kwargs["model"] == "openai/gpt-oss-120b"


def test_openai_final_answer_without_tools():
    client, completions = _openai_client(SimpleNamespace(content=" {\"description\": \"x\"} ", tool_calls=None))
    step = asyncio.run(OpenAICompatLlm(api_key="k", model="m", client=client).next_step([], None))
    assert step.is_final
    assert step.content == '{"description": "x"}'
    assert "tools" not in completions.kwargs


def test_dev_mode_skips_backend():
    client, completions = _openai_client(SimpleNamespace(content="never", tool_calls=None))
    step = asyncio.run(OpenAICompatLlm(api_key="k", model="m", dev_mode=True, client=client).next_step([]))
    assert json.loads(step.content) == DEV_MODE_ANSWER
    assert completions.kwargs is None


def test_missing_key_is_dev_answer():
    step = asyncio.run(OpenAICompatLlm(api_key="", model="m").next_step([]))
    assert step.model == "dev"


def test_reasoning_client_uses_configured_timeout():
    llm = OpenAICompatLlm(api_key="k", model="m", base_url="https://api.groq.com/openai/v1", timeout=12.0)
    assert llm._ensure_client().timeout == 12.0


def test_container_wires_reasoning_timeout(monkeypatch):
    from genmed import container

    monkeypatch.setenv("REASONING_TIMEOUT", "7")
    container.get_settings.cache_clear()
    container._reasoning_llm.cache_clear()
    try:
        assert container._reasoning_llm().timeout == 7.0
    finally:
        container.get_settings.cache_clear()
        container._reasoning_llm.cache_clear()


class _FakeModels:
    def __init__(self, response=None, error=None, delay=0.0):
        self.response, self.error, self.delay = response, error, delay
        self.calls = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.response


def _gemini_client(models):
    return SimpleNamespace(aio=SimpleNamespace(models=models))


def test_gemini_returns_text_and_metadata():
    rsp = SimpleNamespace(text="₹120 per strip", candidates=[SimpleNamespace(grounding_metadata=GROUNDING_META)])
    models = _FakeModels(response=rsp)
    out = asyncio.run(GeminiGroundingLlm(api_key="k", client=_gemini_client(models)).generate("prices?"))
    assert out["text"] == "₹120 per strip"
    assert out["grounding_metadata"] is GROUNDING_META
    tools = models.calls[0]["config"].tools
    assert tools[0].google_search is not None


def test_gemini_sdk_error_is_transport():
    models = _FakeModels(error=RuntimeError("429 RESOURCE_EXHAUSTED"))
    with pytest.raises(UpstreamTransportError, match="429"):
        asyncio.run(GeminiGroundingLlm(api_key="k", client=_gemini_client(models)).generate("p"))


def test_gemini_timeout_is_transport():
    models = _FakeModels(response=SimpleNamespace(text="", candidates=[]), delay=1.0)
    llm = GeminiGroundingLlm(api_key="k", timeout=0.01, client=_gemini_client(models))
    with pytest.raises(UpstreamTransportError, match="timed out"):
        asyncio.run(llm.generate("p"))


def test_gemini_without_key_is_not_configured():
    with pytest.raises(BackendNotConfigured):
        asyncio.run(GeminiGroundingLlm(api_key="").generate("p"))
