"""
Interactive analysis sessions.

A session tracks one category and brand list across a conversation with a
model. Each exchange is annotated on its own, and cumulative metrics are
recomputed by running the engine over every exchange so far, so a session's
numbers always agree with a one-shot analyze() over the same pairs.

Example:
    >>> session = AnalysisSession("CRM software", ["HubSpot", "Salesforce"])
    >>> session.add_exchange("Best CRM?", "HubSpot, then Salesforce.")
    {'brandsMentioned': ['HubSpot', 'Salesforce'], 'firstMention': 'HubSpot'}
    >>> session.results().total_prompts
    1
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .engine import analyze
from .models import AnalysisResult, PromptResponsePair

logger = logging.getLogger(__name__)


@dataclass
class AnalysisSession:
    """
    Accumulates prompt/response exchanges for one category and brand list.

    Attributes:
        category: Product category under discussion
        brands: Tracked brand names
        exchanges: Prompt/response pairs in the order they happened
    """

    category: str
    brands: list[str]
    exchanges: list[PromptResponsePair] = field(default_factory=list)

    def __post_init__(self):
        """Validate the session has something to track."""
        if not self.brands:
            raise ValueError("Session requires at least one brand")

    def add_exchange(self, prompt: str, response: str) -> dict[str, Any]:
        """
        Record one exchange and return its per-message metrics.

        Returns:
            Dict with "brandsMentioned" and "firstMention" for this response
        """
        pair = PromptResponsePair(prompt, response)
        self.exchanges.append(pair)

        prompt_result = analyze(self.category, self.brands, [pair]).prompts[0]
        logger.debug(
            f"Session exchange {len(self.exchanges)}: "
            f"{len(prompt_result.brands_mentioned)} brands mentioned"
        )
        return {
            "brandsMentioned": prompt_result.brands_mentioned,
            "firstMention": prompt_result.first_mention,
        }

    def results(self) -> AnalysisResult:
        """Cumulative analysis over every exchange so far."""
        return analyze(self.category, self.brands, self.exchanges)

    def __len__(self) -> int:
        return len(self.exchanges)
