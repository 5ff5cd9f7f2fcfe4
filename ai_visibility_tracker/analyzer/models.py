"""
Result records produced by the response-analysis engine.

Every record is created fresh per analyze() call and never mutated after
creation. Python attributes are snake_case; to_dict() emits the camelCase
wire keys that the persistence layer and the HTML report key on, including
the legacy aliases "visibility" (prompt coverage) and "citationShare"
(mention share).

Example:
    >>> result = analyze("CRM", ["HubSpot"], [("Best CRM?", "HubSpot.")])
    >>> result.brands[0].to_dict()["visibility"]
    100.0
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, NamedTuple


class ConfidenceLevel(StrEnum):
    """Reliability label derived from the number of prompts analyzed."""

    LOW = "low"
    DIRECTIONAL = "directional"
    HIGH = "high"


class PromptResponsePair(NamedTuple):
    """One model query: the prompt sent and the response text received."""

    prompt: str
    response: str


@dataclass(frozen=True)
class PromptResult:
    """
    Per-prompt annotations.

    Attributes:
        prompt: Prompt text as supplied
        response: Response text as supplied
        brands_mentioned: Brands found in the response, in brand-input order
        brand_contexts: Brand name -> context snippet around its first mention
        urls: Deduplicated URLs in first-seen order
        first_mention: Brand matched earliest in the response, or None
    """

    prompt: str
    response: str
    brands_mentioned: list[str]
    brand_contexts: dict[str, str]
    urls: list[str]
    first_mention: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "prompt": self.prompt,
            "response": self.response,
            "brandsMentioned": list(self.brands_mentioned),
            "brandContexts": dict(self.brand_contexts),
            "urls": list(self.urls),
            "firstMention": self.first_mention,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PromptResult":
        return cls(
            prompt=data["prompt"],
            response=data["response"],
            brands_mentioned=list(data.get("brandsMentioned", [])),
            brand_contexts=dict(data.get("brandContexts", {})),
            urls=list(data.get("urls", [])),
            first_mention=data.get("firstMention"),
        )


@dataclass(frozen=True)
class BrandResult:
    """
    Per-brand rollup across all prompts of one analysis.

    Attributes:
        name: Brand name as supplied by the caller
        mentions: Total non-overlapping matches across all responses
        prompts_with_brand: Number of responses with at least one match
        first_mentions: Number of responses where this brand was matched first
        prompt_coverage: % of prompts mentioning the brand (1 decimal)
        mention_share: % of all tracked-brand mentions (1 decimal)
        mentions_per_prompt: Mentions per prompt where it appears (2 decimals)
        first_mention_rate: % of its appearances where it came first (1 decimal)
        missed_prompts: Prompts without a mention
        contexts: Up to 5 distinct snippets, in discovery order
    """

    name: str
    mentions: int
    prompts_with_brand: int
    first_mentions: int
    prompt_coverage: float
    mention_share: float
    mentions_per_prompt: float
    first_mention_rate: float
    missed_prompts: int
    contexts: list[str] = field(default_factory=list)

    @property
    def visibility(self) -> float:
        """Legacy alias for prompt_coverage."""
        return self.prompt_coverage

    @property
    def citation_share(self) -> float:
        """Legacy alias for mention_share."""
        return self.mention_share

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "promptCoverage": self.prompt_coverage,
            "mentionShare": self.mention_share,
            "mentionsPerPrompt": self.mentions_per_prompt,
            "firstMentionRate": self.first_mention_rate,
            "missedPrompts": self.missed_prompts,
            "mentions": self.mentions,
            "promptsWithBrand": self.prompts_with_brand,
            "firstMentions": self.first_mentions,
            "visibility": self.visibility,
            "citationShare": self.citation_share,
            "contexts": list(self.contexts),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BrandResult":
        return cls(
            name=data["name"],
            mentions=data["mentions"],
            prompts_with_brand=data["promptsWithBrand"],
            first_mentions=data["firstMentions"],
            prompt_coverage=data["promptCoverage"],
            mention_share=data["mentionShare"],
            mentions_per_prompt=data["mentionsPerPrompt"],
            first_mention_rate=data["firstMentionRate"],
            missed_prompts=data["missedPrompts"],
            contexts=list(data.get("contexts", [])),
        )


@dataclass(frozen=True)
class CitationResult:
    """A URL cited in responses, with its normalized domain and run-wide count."""

    url: str
    domain: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "domain": self.domain, "count": self.count}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CitationResult":
        return cls(url=data["url"], domain=data["domain"], count=data["count"])


@dataclass(frozen=True)
class AnalysisResult:
    """
    Complete output of one analyze() call.

    Attributes:
        category: Product category the prompts were about
        brands: Brand rollups, ranked
        prompts: Per-prompt annotations, in input order
        citations: Top cited URLs, ranked, at most 20
        total_mentions: Sum of mentions across all brands
        total_prompts: Number of prompt/response pairs analyzed
        confidence_level: Sample-size reliability label
    """

    category: str
    brands: list[BrandResult]
    prompts: list[PromptResult]
    citations: list[CitationResult]
    total_mentions: int
    total_prompts: int
    confidence_level: ConfidenceLevel

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "brands": [brand.to_dict() for brand in self.brands],
            "prompts": [prompt.to_dict() for prompt in self.prompts],
            "citations": [citation.to_dict() for citation in self.citations],
            "totalMentions": self.total_mentions,
            "totalPrompts": self.total_prompts,
            "confidenceLevel": str(self.confidence_level),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalysisResult":
        return cls(
            category=data["category"],
            brands=[BrandResult.from_dict(b) for b in data.get("brands", [])],
            prompts=[PromptResult.from_dict(p) for p in data.get("prompts", [])],
            citations=[CitationResult.from_dict(c) for c in data.get("citations", [])],
            total_mentions=data["totalMentions"],
            total_prompts=data["totalPrompts"],
            confidence_level=ConfidenceLevel(data["confidenceLevel"]),
        )
