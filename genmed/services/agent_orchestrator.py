# genmed/services/agent_orchestrator.py
from __future__ import annotations
import json
import logging
import re
import time
from typing import Any, Dict, List, Optional

from genmed.domain.models import PlannerStep
from genmed.domain.ports import ReasoningPort
from genmed.services.prompt_service import PromptService
from genmed.services.tools.base import dumps
from genmed.services.tools.registry import ToolRegistry

logger = logging.getLogger("genmed.agent")

MAX_TURNS = 8
FALLBACK_DESCRIPTION = (
    "Sorry, I could not gather reliable details for this medicine right now. "
    "Please check the spelling or try the generic (salt) name, and ask your doctor or pharmacist "
    "before switching brands. Jan Aushadhi Kendras usually stock the cheapest generics."
)

_FENCE_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.S)


def _shorten(s: str | None, n: int = 600) -> str:
    s = (s or "").strip()
    return s if len(s) <= n else s[:n] + "…"


def parse_recommendation(text: str | None) -> Dict[str, Any]:
    """
    Final model output -> dict. Takes a JSON object from the raw text, a fenced block,
    or the outermost braces; anything else becomes {"description": text}. Shape is not checked.
    """
    text = (text or "").strip()
    if not text:
        return {"description": FALLBACK_DESCRIPTION}

    candidates = [text]
    m = _FENCE_RE.search(text)
    if m:
        candidates.append(m.group(1))
    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        candidates.append(text[start:end + 1])

    for c in candidates:
        try:
            obj = json.loads(c)
        except ValueError:
            continue
        if isinstance(obj, dict):
            return obj
    return {"description": text}


class AgentOrchestrator:
    def __init__(self, llm: ReasoningPort, tools: ToolRegistry,
                 prompts: PromptService | None = None, max_turns: int = MAX_TURNS):
        self.llm = llm
        self.tools = tools
        self.prompts = prompts or PromptService()
        self.max_turns = max_turns

    async def _execute(self, step: PlannerStep, messages: List[Dict[str, Any]], trace: List[str]) -> None:
        messages.append({
            "role": "assistant",
            "content": step.content,
            "tool_calls": [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": tc.arguments},
                }
                for tc in step.tool_calls
            ],
        })
        for tc in step.tool_calls:
            trace.append(tc.name)
            tool = self.tools.get(tc.name)
            if tool is None:
                logger.warning("Model asked for unknown tool %r", tc.name)
                result = dumps({"success": False, "error": f"Unknown tool: {tc.name}"})
            else:
                result = await tool.invoke(tc.arguments)
            messages.append({"role": "tool", "tool_call_id": tc.id, "content": result})

    async def run(self, query: str) -> str:
        """Run the tool loop and return the model's final text."""
        messages: List[Dict[str, Any]] = [
            {"role": "system", "content": self.prompts.system_prompt()},
            {"role": "user", "content": query},
        ]
        definitions = self.tools.definitions()
        trace: List[str] = []
        t0 = time.monotonic()

        final: Optional[PlannerStep] = None
        for _ in range(self.max_turns):
            step = await self.llm.next_step(messages, definitions)
            if step.is_final:
                final = step
                break
            await self._execute(step, messages, trace)

        if final is None:
            # turn budget spent; ask once more without tools so the model must answer
            logger.warning("Agent hit max_turns=%s, forcing final answer", self.max_turns)
            final = await self.llm.next_step(messages, None)

        answer = (final.content or "").strip()
        logger.info(json.dumps({
            "event": "agent.reply",
            "latency_ms": int((time.monotonic() - t0) * 1000),
            "model": final.model,
            "tool_calls": trace,
            "answer_preview": _shorten(answer),
        }, ensure_ascii=False))
        return answer

    async def handle(self, query: str) -> Dict[str, Any]:
        answer = await self.run(query)
        return parse_recommendation(answer)
