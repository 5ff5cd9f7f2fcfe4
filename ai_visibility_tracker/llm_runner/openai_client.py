"""
OpenAI-compatible chat completions client for AI Visibility Tracker.

One client serves OpenAI, xAI (Grok), Google Gemini and local Ollama, all of
which expose `POST {base_url}/chat/completions` with the OpenAI request and
response shapes.

Key features:
- Async HTTP client (httpx.AsyncClient) so batches run concurrently
- Retry on transient failures (429, 5xx, network) with exponential backoff
- Fail fast on permanent errors (400, 401, 404)
- Provider failures surface as LLMProviderError subclasses
- Security: NEVER logs API keys

Example:
    >>> client = OpenAICompatibleClient(
    ...     provider="openai",
    ...     model_name="gpt-4o",
    ...     api_key="sk-...",
    ...     base_url="https://api.openai.com/v1",
    ... )
    >>> response = await client.generate_answer("What is the best CRM software?")
    >>> print(response.answer_text[:100])
"""

import logging
from typing import Any

import httpx

from ai_visibility_tracker.config.constants import (
    DEFAULT_MAX_TOKENS,
    MAX_PROMPT_LENGTH,
)
from ai_visibility_tracker.exceptions import (
    LLMAuthenticationError,
    LLMProviderError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
)
from ai_visibility_tracker.llm_runner.models import LLMResponse
from ai_visibility_tracker.llm_runner.retry_config import (
    MAX_ATTEMPTS,
    MIN_WAIT_SECONDS,
    NO_RETRY_STATUS_CODES,
    REQUEST_TIMEOUT,
    RETRY_STATUS_CODES,
    create_retry_decorator,
)
from ai_visibility_tracker.utils.time import utc_timestamp

# Suppress HTTPX request logging (request lines include full URLs)
httpx_logger = logging.getLogger("httpx")
httpx_logger.setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.4

# Consumer chat assistant tone, not analyst reports
SYSTEM_PROMPT = """\
You are a knowledgeable, neutral, human-sounding product expert.

Your goal is to answer questions the way ChatGPT would:
- Clear, natural, and conversational
- Confident but not salesy
- Helpful without sounding like a report

When users ask for recommendations or comparisons:
- Mention relevant brands naturally, not as a forced list
- Explain *why* certain options are better in plain language
- Use structure only when it improves clarity
- Avoid repeating the same phrasing across brands
- Avoid marketing copy and analyst-style reports

Important constraints:
- Do NOT force a fixed number of recommendations
- Do NOT always use pros/cons sections
- Do NOT mention pricing unless it is widely known or directly relevant
- Prefer short paragraphs over long lists
- Write like a human explaining things to another human

If the question is vague, make reasonable assumptions and briefly explain them.
If the question is specific, stay focused and concise.

The response should feel trustworthy, readable, and natural, not AI-generated."""

USER_PROMPT_TEMPLATE = "Answer naturally, like ChatGPT would.\n\nQuestion:\n{prompt}"


class OpenAICompatibleClient:
    """
    Chat completions client with async retry logic.

    Implements the LLMClient protocol.

    Attributes:
        provider: Provider identifier reported in responses
        model_name: Model identifier (e.g., "gpt-4o", "llama3.2")
        api_key: Bearer token for authentication (NEVER logged)
        base_url: Endpoint root without trailing slash
        temperature: Sampling temperature
        max_tokens: Maximum answer length in tokens

    Retry behavior:
        - Retries on: 429, 500, 502, 503, 504, connection errors, timeouts
        - Fails immediately on: 400, 401, 404 and other 4xx
        - Max attempts: 3 (from retry_config.MAX_ATTEMPTS)
    """

    def __init__(
        self,
        provider: str,
        model_name: str,
        api_key: str,
        base_url: str,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = REQUEST_TIMEOUT,
        max_attempts: int = MAX_ATTEMPTS,
        retry_min_wait: float = MIN_WAIT_SECONDS,
    ):
        """
        Initialize the client.

        Raises:
            ValueError: If model_name, api_key, or base_url is empty

        Security:
            - The api_key parameter is NEVER logged
            - We only validate it's non-empty locally
        """
        if not model_name or model_name.isspace():
            raise ValueError("model_name cannot be empty")

        if not api_key or api_key.isspace():
            raise ValueError("api_key cannot be empty")

        if not base_url or base_url.isspace():
            raise ValueError("base_url cannot be empty")

        self.provider = provider
        self.model_name = model_name
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

        self._post_with_retry = create_retry_decorator(
            max_attempts=max_attempts, min_wait=retry_min_wait
        )(self._post)

        logger.info(
            f"Initialized {provider} client for model: {model_name} ({self.base_url})"
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    async def generate_answer(self, prompt: str) -> LLMResponse:
        """
        Execute one query with automatic retry.

        Args:
            prompt: Question to send to the model

        Returns:
            LLMResponse with answer text and token usage

        Raises:
            ValueError: If prompt is empty or too long
            LLMAuthenticationError: On 401
            LLMRateLimitError: On 429 after retries are exhausted
            LLMTimeoutError: On timeout after retries are exhausted
            LLMResponseError: On 400/404, malformed JSON, or empty content
            LLMProviderError: On server or connection errors after retries
        """
        if not prompt or prompt.isspace():
            raise ValueError("Prompt cannot be empty")

        if len(prompt) > MAX_PROMPT_LENGTH:
            raise ValueError(
                f"Prompt exceeds maximum length of {MAX_PROMPT_LENGTH:,} characters "
                f"(received {len(prompt):,} characters)"
            )

        payload = {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": USER_PROMPT_TEMPLATE.format(prompt=prompt)},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        logger.debug(f"Sending request to {self.provider}: model={self.model_name}")

        try:
            response = await self._post_with_retry(payload)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(
                f"{self.provider} API HTTP error after retries: "
                f"status={status}, model={self.model_name}, "
                f"detail={self._extract_error_detail(e.response)}"
            )
            if status == 429:
                raise LLMRateLimitError("Rate limit exceeded. Please retry shortly.") from e
            raise LLMProviderError(
                f"AI service error (HTTP {status}). Please try again later."
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"{self.provider} API timeout: model={self.model_name}, error={e}")
            raise LLMTimeoutError(
                f"Request to {self.provider} timed out after {self.timeout:.0f}s"
            ) from e
        except httpx.ConnectError as e:
            logger.error(
                f"{self.provider} API connection error: model={self.model_name}, error={e}"
            )
            if self.provider == "ollama":
                raise LLMProviderError(
                    "Cannot connect to Ollama. Make sure it is running."
                ) from e
            raise LLMProviderError(f"Cannot connect to {self.base_url}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise LLMResponseError(
                "AI service returned an invalid response. "
                "The model may still be loading, please retry."
            ) from e

        if not isinstance(data, dict):
            raise LLMResponseError(
                f"Invalid {self.provider} response: expected a JSON object"
            )

        answer_text = self._extract_answer_text(data)
        prompt_tokens, completion_tokens, tokens_used = self._extract_token_usage(data)

        return LLMResponse(
            answer_text=answer_text,
            provider=self.provider,
            model_name=self.model_name,
            timestamp_utc=utc_timestamp(),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            tokens_used=tokens_used,
        )

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        """
        Send one request attempt.

        Permanent failures raise LLMProviderError subclasses, which the retry
        decorator does not catch; retryable statuses raise HTTPStatusError.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(self.endpoint, json=payload, headers=headers)

        status = response.status_code
        if status in NO_RETRY_STATUS_CODES or (
            400 <= status < 500 and status not in RETRY_STATUS_CODES
        ):
            detail = self._extract_error_detail(response)
            logger.error(
                f"{self.provider} API error (non-retryable): "
                f"status={status}, model={self.model_name}, detail={detail}"
            )
            if status == 401:
                raise LLMAuthenticationError("Invalid API key.")
            if status == 404:
                raise LLMResponseError(f'Model "{self.model_name}" not found.')
            raise LLMResponseError(f"Request rejected (HTTP {status}): {detail}")

        if status in RETRY_STATUS_CODES:
            logger.warning(
                f"{self.provider} API returned {status} for model={self.model_name}, "
                "retrying"
            )

        response.raise_for_status()
        return response

    def _extract_answer_text(self, data: dict[str, Any]) -> str:
        """
        Extract the first choice's message content.

        Raises:
            LLMResponseError: If the structure is invalid or content is empty
        """
        try:
            content = data["choices"][0]["message"].get("content")
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise LLMResponseError(f"Invalid {self.provider} response structure: {e}") from e

        if not content or not str(content).strip():
            raise LLMResponseError("AI returned an empty response.")

        return str(content)

    def _extract_token_usage(self, data: dict[str, Any]) -> tuple[int, int, int]:
        """
        Extract (prompt_tokens, completion_tokens, total_tokens).

        Missing usage data yields zeros; Ollama omits it for some models.
        """
        usage = data.get("usage")
        if not usage or not isinstance(usage, dict):
            logger.debug(f"{self.provider} response missing 'usage' for model={self.model_name}")
            return 0, 0, 0

        prompt_tokens = int(usage.get("prompt_tokens") or 0)
        completion_tokens = int(usage.get("completion_tokens") or 0)
        total_tokens = int(usage.get("total_tokens") or prompt_tokens + completion_tokens)
        return prompt_tokens, completion_tokens, total_tokens

    def _extract_error_detail(self, response: httpx.Response) -> str:
        """
        Extract the error message from an error response body.

        NEVER includes API keys; only the provider's message is returned.
        """
        try:
            body = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"

        error = body.get("error", {}) if isinstance(body, dict) else None

        if isinstance(error, dict):
            return str(error.get("message", "Unknown error"))
        if isinstance(error, str):
            return error
        return f"HTTP {response.status_code}"
