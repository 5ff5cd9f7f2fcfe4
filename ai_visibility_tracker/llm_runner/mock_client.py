"""
Mock LLM client for testing and demos.

Provides MockLLMClient that implements the LLMClient protocol without making
real API calls. Used for deterministic testing of the whole pipeline and by
the `demo` command, which needs no API key.

Example:
    >>> client = MockLLMClient(
    ...     responses={"What is the best CRM?": "HubSpot and Salesforce are great."}
    ... )
    >>> response = await client.generate_answer("What is the best CRM?")
    >>> response.answer_text
    'HubSpot and Salesforce are great.'
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ai_visibility_tracker.exceptions import LLMProviderError
from ai_visibility_tracker.llm_runner.models import LLMResponse
from ai_visibility_tracker.utils.time import utc_timestamp

logger = logging.getLogger(__name__)


@dataclass
class MockLLMClient:
    """
    Deterministic LLMClient for tests and offline demos.

    Attributes:
        responses: Prompt -> answer mapping. Unknown prompts get
            default_response, or the result of response_factory when set.
        default_response: Answer for prompts not in responses
        response_factory: Optional callable computing an answer from the prompt
        fail_on: Prompts that raise LLMProviderError instead of answering
        model_name: Model identifier reported in responses
        provider: Provider name reported in responses
        tokens_per_response: Token count reported for each response
        calls: Prompts received, in call order
    """

    responses: dict[str, str] = field(default_factory=dict)
    default_response: str = "Mock LLM response."
    response_factory: Callable[[str], str] | None = None
    fail_on: set[str] = field(default_factory=set)
    model_name: str = "mock-model"
    provider: str = "mock"
    tokens_per_response: int = 100
    calls: list[str] = field(default_factory=list)

    def __post_init__(self):
        logger.info(
            f"Initialized MockLLMClient with {len(self.responses)} configured responses"
        )

    async def generate_answer(self, prompt: str) -> LLMResponse:
        """
        Return the configured answer for prompt.

        Raises:
            LLMProviderError: If prompt is listed in fail_on
        """
        self.calls.append(prompt)

        if prompt in self.fail_on:
            raise LLMProviderError(f"Mock failure for prompt: {prompt[:50]}")

        if prompt in self.responses:
            answer_text = self.responses[prompt]
        elif self.response_factory is not None:
            answer_text = self.response_factory(prompt)
        else:
            answer_text = self.default_response

        logger.debug(f"MockLLMClient returning answer for prompt: {prompt[:50]}...")

        return LLMResponse(
            answer_text=answer_text,
            provider=self.provider,
            model_name=self.model_name,
            timestamp_utc=utc_timestamp(),
            prompt_tokens=self.tokens_per_response // 2,
            completion_tokens=self.tokens_per_response // 2,
            tokens_used=self.tokens_per_response,
        )
