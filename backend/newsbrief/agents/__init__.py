"""Agents package - LLM-backed summary generation."""

from newsbrief.agents.completion import (
    AnthropicClient,
    Completion,
    CompletionClient,
    GeminiClient,
    OpenAICompatibleClient,
)
from newsbrief.agents.summary_agent import SummaryAgent
from newsbrief.config import Settings
from newsbrief.repositories import SummaryLogRepository


def get_completion_client(settings: Settings) -> CompletionClient | None:
    """Get the completion backend for `llm_provider`, or None when its key is missing."""
    model = settings.summary_model or None

    if settings.llm_provider == "anthropic":
        if not settings.anthropic_api_key:
            return None
        return AnthropicClient(api_key=settings.anthropic_api_key, model=model)

    if settings.llm_provider == "gemini":
        if not settings.gemini_api_key:
            return None
        return GeminiClient(api_key=settings.gemini_api_key, model=model)

    if not settings.openai_api_key:
        return None
    return OpenAICompatibleClient(
        api_key=settings.openai_api_key,
        model=model,
        base_url=settings.openai_base_url,
    )


def get_summary_agent(
    settings: Settings,
    log_repo: SummaryLogRepository | None = None,
) -> SummaryAgent | None:
    """Get a summary agent, or None when summarization is not configured."""
    client = get_completion_client(settings)
    if client is None:
        return None
    return SummaryAgent(client, log_repo=log_repo, language=settings.summary_language)


__all__ = [
    "SummaryAgent",
    "Completion",
    "CompletionClient",
    "OpenAICompatibleClient",
    "AnthropicClient",
    "GeminiClient",
    "get_completion_client",
    "get_summary_agent",
]
