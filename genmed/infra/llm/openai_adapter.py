# genmed/infra/llm/openai_adapter.py
from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from genmed.domain.models import PlannerStep, ToolCall
from genmed.domain.ports import ReasoningPort

logger = logging.getLogger("genmed.agent")

DEV_MODE_ANSWER = {
    "description": (
        "Local/dev mode: the reasoning backend was not called. "
        "Set GROQ_API_KEY (and DEV_MODE=0) to get generic alternatives with Indian prices."
    )
}


class OpenAICompatLlm(ReasoningPort):
    """
    Tool-calling chat completions against any OpenAI-compatible endpoint (Groq by default).
    """
    def __init__(self, api_key: str, model: str, base_url: str | None = None,
                 temperature: float = 0.2, dev_mode: bool = False, timeout: float = 60.0,
                 client: AsyncOpenAI | None = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.dev_mode = dev_mode
        self.timeout = timeout
        self._client = client

    def _client_ok(self) -> bool:
        if self.dev_mode:
            return False
        return self._client is not None or bool(self.api_key)

    def _ensure_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def next_step(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> PlannerStep:
        # Fallback lokal/dev
        if not self._client_ok():
            return PlannerStep(content=json.dumps(DEV_MODE_ANSWER), model="dev")

        client = self._ensure_client()
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"

        rsp = await client.chat.completions.create(**kwargs)
        msg = rsp.choices[0].message

        calls = [
            ToolCall(id=tc.id, name=tc.function.name, arguments=tc.function.arguments or "{}")
            for tc in (msg.tool_calls or [])
            if getattr(tc, "function", None) is not None
        ]
        return PlannerStep(content=(msg.content or "").strip() or None, tool_calls=calls, model=self.model)
