"""
LLM client abstraction and factory for AI Visibility Tracker.

Every supported provider (OpenAI, Ollama, xAI, Google Gemini) exposes an
OpenAI-compatible chat completions endpoint, so a single client
implementation serves all of them; providers differ only in base URL,
default model, default temperature and API-key source.

Key components:
- LLMResponse: Structured dataclass holding one answer plus metadata
- LLMClient: Protocol defining the provider-agnostic interface
- build_client: Factory creating a client from a resolved provider config

Example:
    >>> from ai_visibility_tracker.llm_runner.models import build_client
    >>> client = build_client(config.provider)
    >>> response = await client.generate_answer("What is the best CRM software?")
    >>> print(response.answer_text)
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ai_visibility_tracker.config.schema import RuntimeProvider


@dataclass
class LLMResponse:
    """
    Structured response from a model query.

    Attributes:
        answer_text: The model's complete response text
        provider: Provider name (e.g., "openai", "ollama")
        model_name: Specific model identifier (e.g., "gpt-4o")
        timestamp_utc: ISO 8601 timestamp with 'Z' suffix when received
        prompt_tokens: Tokens in the prompt/input
        completion_tokens: Tokens in the completion/output
        tokens_used: Total tokens consumed (prompt + completion)

    Example:
        >>> response = LLMResponse(
        ...     answer_text="HubSpot is a popular choice...",
        ...     provider="openai",
        ...     model_name="gpt-4o",
        ...     timestamp_utc="2025-11-02T08:30:45Z",
        ...     prompt_tokens=100,
        ...     completion_tokens=350,
        ...     tokens_used=450,
        ... )
        >>> response.prompt_tokens + response.completion_tokens == response.tokens_used
        True
    """

    answer_text: str
    provider: str
    model_name: str
    timestamp_utc: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    tokens_used: int = 0


class LLMClient(Protocol):
    """
    Provider-agnostic interface for model clients.

    Implementations MUST:
    - Use async/await for HTTP requests (httpx.AsyncClient)
    - Retry transient failures (rate limits, server errors)
    - Raise LLMProviderError subclasses on permanent failures
    - Never log API keys or sensitive credentials
    """

    async def generate_answer(self, prompt: str) -> LLMResponse:
        """
        Execute one query and return the structured response.

        Raises:
            LLMProviderError: On permanent failures or after retries are
                exhausted
        """
        ...


def build_client(provider: "RuntimeProvider") -> LLMClient:
    """
    Factory function to create an LLM client from a resolved provider.

    Args:
        provider: RuntimeProvider produced by config.loader (API key resolved,
            defaults applied)

    Returns:
        LLMClient: Client implementing the LLMClient protocol

    Raises:
        ValueError: If the provider is not supported

    Security:
        - NEVER log the api_key in any form
        - API keys are only passed to the client constructor
    """
    if provider.name in ("openai", "ollama", "xai", "google"):
        # openai_client imports this module
        from ai_visibility_tracker.llm_runner.openai_client import (
            OpenAICompatibleClient,
        )

        return OpenAICompatibleClient(
            provider=provider.name,
            model_name=provider.model_name,
            api_key=provider.api_key,
            base_url=provider.base_url,
            temperature=provider.temperature,
            max_tokens=provider.max_tokens,
        )

    raise ValueError(
        f"Unsupported provider: '{provider.name}'. "
        f"Supported providers: openai, ollama, xai, google"
    )
