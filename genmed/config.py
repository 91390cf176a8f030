# genmed/config.py
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import List


def _split_csv(raw: str) -> List[str]:
    return [o.strip().rstrip("/") for o in (raw or "").split(",") if o.strip()]


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration, read once from the environment (.env is loaded by main.py).
    Passed explicitly into adapters so tests can build isolated instances.
    """
    groq_api_key: str = ""
    gemini_api_key: str = ""
    port: int = 3000
    app_version: str = "0.1.0"

    reasoning_base_url: str = "https://api.groq.com/openai/v1"
    reasoning_model: str = "openai/gpt-oss-120b"
    grounding_model: str = "gemini-2.5-flash"
    rxnav_base: str = "https://rxnav.nlm.nih.gov/REST"

    rxnav_timeout: float = 5.0
    grounding_timeout: float = 30.0
    reasoning_timeout: float = 60.0
    agent_max_turns: int = 8
    temperature: float = 0.2
    dev_mode: bool = False
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            groq_api_key=os.getenv("GROQ_API_KEY", ""),
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY", ""),
            port=int(os.getenv("PORT", "3000")),
            app_version=os.getenv("APP_VERSION", "0.1.0"),
            reasoning_base_url=os.getenv("REASONING_BASE_URL", "https://api.groq.com/openai/v1"),
            reasoning_model=os.getenv("REASONING_MODEL", "openai/gpt-oss-120b"),
            grounding_model=os.getenv("GROUNDING_MODEL", "gemini-2.5-flash"),
            rxnav_base=os.getenv("RXNAV_BASE", "https://rxnav.nlm.nih.gov/REST").rstrip("/"),
            rxnav_timeout=float(os.getenv("RXNAV_TIMEOUT", "5")),
            grounding_timeout=float(os.getenv("GROUNDING_TIMEOUT", "30")),
            reasoning_timeout=float(os.getenv("REASONING_TIMEOUT", "60")),
            agent_max_turns=int(os.getenv("AGENT_MAX_TURNS", "8")),
            temperature=float(os.getenv("LLM_TEMPERATURE", "0.2")),
            dev_mode=os.getenv("DEV_MODE", "0") == "1",
            cors_allow_origins=_split_csv(os.getenv("CORS_ALLOW_ORIGINS", "*")) or ["*"],
        )
