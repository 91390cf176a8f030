# genmed/container.py
from functools import lru_cache

from genmed.config import Settings
from genmed.infra.llm.gemini_grounding import GeminiGroundingLlm
from genmed.infra.llm.openai_adapter import OpenAICompatLlm
from genmed.infra.rxnav.rxnav_adapter import RxNavAdapter

from genmed.services.agent_orchestrator import AgentOrchestrator
from genmed.services.price_grounding import PriceGroundingClient
from genmed.services.prompt_service import PromptService
from genmed.services.result_merger import ResultMerger
from genmed.services.tools.registry import ToolRegistry, build_default_registry
from genmed.services.vocabulary_resolver import VocabularyResolver


@lru_cache
def get_settings() -> Settings: return Settings.from_env()

@lru_cache
def _prompts() -> PromptService: return PromptService()

@lru_cache
def _rxnav() -> RxNavAdapter:
    s = get_settings()
    return RxNavAdapter(base_url=s.rxnav_base, timeout=s.rxnav_timeout)

@lru_cache
def _grounding_llm() -> GeminiGroundingLlm:
    s = get_settings()
    return GeminiGroundingLlm(api_key=s.gemini_api_key, model=s.grounding_model, timeout=s.grounding_timeout)

@lru_cache
def _reasoning_llm() -> OpenAICompatLlm:
    s = get_settings()
    return OpenAICompatLlm(
        api_key=s.groq_api_key,
        model=s.reasoning_model,
        base_url=s.reasoning_base_url,
        temperature=s.temperature,
        timeout=s.reasoning_timeout,
        dev_mode=s.dev_mode,
    )

@lru_cache
def _resolver() -> VocabularyResolver: return VocabularyResolver(_rxnav())

@lru_cache
def _prices() -> PriceGroundingClient: return PriceGroundingClient(_grounding_llm(), _prompts())

@lru_cache
def _merger() -> ResultMerger: return ResultMerger(_resolver(), _prices())

@lru_cache
def _tools() -> ToolRegistry: return build_default_registry(_resolver(), _prices(), _merger())

@lru_cache
def _agent() -> AgentOrchestrator:
    return AgentOrchestrator(
        llm=_reasoning_llm(), tools=_tools(), prompts=_prompts(), max_turns=get_settings().agent_max_turns,
    )

def get_agent_orchestrator(): return _agent()
