# genmed/infra/llm/gemini_grounding.py
from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict

from google import genai
from google.genai import types

from genmed.domain.errors import BackendNotConfigured, UpstreamMalformedError, UpstreamTransportError
from genmed.domain.ports import GroundingPort

logger = logging.getLogger("genmed.grounding")


class GeminiGroundingLlm(GroundingPort):
    """
    Gemini generate_content with the Google Search tool enabled.
    Used only by the price/web lookups; the agent reasons on a different backend.
    """
    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", timeout: float = 30.0,
                 client: genai.Client | None = None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = client

    def _client_ok(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _ensure_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate(self, prompt: str) -> Dict[str, Any]:
        if not self._client_ok():
            raise BackendNotConfigured("Grounding backend is not configured (GEMINI_API_KEY missing)")

        client = self._ensure_client()
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )
        try:
            rsp = await asyncio.wait_for(
                client.aio.models.generate_content(model=self.model, contents=prompt, config=config),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamTransportError(f"Grounding call timed out after {self.timeout}s") from e
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # quota / auth / network errors from the SDK all surface here
            raise UpstreamTransportError(str(e) or e.__class__.__name__) from e

        candidates = getattr(rsp, "candidates", None) or []
        if not candidates:
            raise UpstreamMalformedError("Grounding response has no candidates")

        return {
            "text": (getattr(rsp, "text", None) or "").strip(),
            "grounding_metadata": getattr(candidates[0], "grounding_metadata", None),
            "model": self.model,
        }
