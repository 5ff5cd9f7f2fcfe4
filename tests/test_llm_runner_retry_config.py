"""
Tests for llm_runner/retry_config.py module.

Test coverage:
- Retry and fail-fast status code sets
- Retry on transient httpx errors up to MAX_ATTEMPTS
- No retry on other exceptions
"""

import httpx
import pytest

from ai_visibility_tracker.llm_runner.retry_config import (
    MAX_ATTEMPTS,
    NO_RETRY_STATUS_CODES,
    RETRY_STATUS_CODES,
    create_retry_decorator,
)


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://api.example.test/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


def test_status_code_sets_are_disjoint():
    assert RETRY_STATUS_CODES.isdisjoint(NO_RETRY_STATUS_CODES)
    assert 429 in RETRY_STATUS_CODES
    assert 401 in NO_RETRY_STATUS_CODES


@pytest.mark.asyncio
async def test_retries_transient_errors_until_success():
    calls = []

    @create_retry_decorator(min_wait=0)
    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise _status_error(503)
        return "ok"

    assert await flaky() == "ok"
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_reraises_last_error_after_max_attempts():
    calls = []

    @create_retry_decorator(min_wait=0)
    async def always_timeout():
        calls.append(1)
        raise httpx.ConnectTimeout("timed out")

    with pytest.raises(httpx.ConnectTimeout):
        await always_timeout()

    assert len(calls) == MAX_ATTEMPTS


@pytest.mark.asyncio
async def test_custom_max_attempts():
    calls = []

    @create_retry_decorator(max_attempts=1, min_wait=0)
    async def failing():
        calls.append(1)
        raise httpx.ConnectError("refused")

    with pytest.raises(httpx.ConnectError):
        await failing()

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_does_not_retry_other_exceptions():
    calls = []

    @create_retry_decorator(min_wait=0)
    async def broken():
        calls.append(1)
        raise ValueError("permanent")

    with pytest.raises(ValueError):
        await broken()

    assert len(calls) == 1
