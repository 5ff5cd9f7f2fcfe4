"""
Retry configuration for model API calls.

Centralized tenacity configuration shared by every client:
- Exponential backoff between attempts
- Retry on network errors and server errors (429, 5xx)
- Fail fast on client errors (400, 401, 404)
"""

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

# ============================================================================
# RETRY CONSTANTS
# ============================================================================

# Total attempts = 1 initial + 2 retries
MAX_ATTEMPTS = 3

# Backoff bounds between retries (seconds)
MIN_WAIT_SECONDS = 1
MAX_WAIT_SECONDS = 30

# 429: rate limit; 5xx: transient server errors
RETRY_STATUS_CODES = frozenset([429, 500, 502, 503, 504])

# 400: bad request; 401: invalid key; 404: unknown model
NO_RETRY_STATUS_CODES = frozenset([400, 401, 404])

# Long answers with max_tokens=4000 can take a while on local models
REQUEST_TIMEOUT = 120.0

# ============================================================================
# RETRY DECORATOR FACTORY
# ============================================================================


def create_retry_decorator(max_attempts: int = MAX_ATTEMPTS, min_wait: float = MIN_WAIT_SECONDS):
    """
    Create a tenacity retry decorator for model API calls.

    Retries on httpx.HTTPStatusError, httpx.ConnectError and
    httpx.TimeoutException; the wrapped call must raise something else for
    status codes in NO_RETRY_STATUS_CODES so they fail immediately. The last
    exception is re-raised once attempts are exhausted.

    Args:
        max_attempts: Total attempts including the first
        min_wait: First backoff interval in seconds; later waits double it,
            capped at MAX_WAIT_SECONDS

    Example:
        >>> @create_retry_decorator()
        ... async def post():
        ...     response.raise_for_status()
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=min_wait, min=min_wait, max=MAX_WAIT_SECONDS),
        retry=retry_if_exception_type(
            (
                httpx.HTTPStatusError,
                httpx.ConnectError,
                httpx.TimeoutException,
            )
        ),
        reraise=True,
    )
