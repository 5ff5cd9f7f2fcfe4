"""
LLM runner module for AI Visibility Tracker.

Queries a model with category prompts and hands the answers to the analysis
engine.

Key exports:
    - LLMClient, LLMResponse, build_client: Client protocol and factory
    - MockLLMClient: Deterministic client for tests and demos
    - generate_prompts, collect_responses, run_analysis: Run orchestration
"""

from .mock_client import MockLLMClient
from .models import LLMClient, LLMResponse, build_client
from .runner import collect_responses, generate_prompts, run_analysis

__all__ = [
    "LLMClient",
    "LLMResponse",
    "MockLLMClient",
    "build_client",
    "collect_responses",
    "generate_prompts",
    "run_analysis",
]
