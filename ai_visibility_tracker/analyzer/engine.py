"""
Response-analysis engine for AI Visibility Tracker.

Turns (prompt, response) pairs plus a list of tracked brand names into
per-brand visibility metrics, per-prompt annotations, and a ranked citation
list. The engine is a pure function: no I/O, no state kept between calls,
and identical inputs always produce identical outputs.

Processing pipeline:
1. Per prompt, for each brand in input order: count mentions, record the
   context snippet, update running totals, track the earliest match
2. Fold each response's URLs into the run-wide citation tally
3. Derive the four visibility metrics per brand
4. Rank brands and citations deterministically

Metrics:
- Prompt coverage (primary): % of prompts mentioning the brand
- Mention share: % of all tracked-brand mentions attributable to the brand
- Mentions per prompt: mentions / prompts where the brand appears
- First-mention rate: % of appearances where the brand was matched first

Example:
    >>> result = analyze(
    ...     "CRM software",
    ...     ["HubSpot", "Salesforce"],
    ...     [("Best CRM?", "Salesforce leads, but HubSpot is easier.")],
    ... )
    >>> result.prompts[0].first_mention
    'Salesforce'
    >>> result.brands[0].prompt_coverage
    100.0
"""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .citations import CitationTally, extract_urls, rank_citations
from .context import add_context, extract_context
from .mentions import NOT_FOUND, count_mentions, first_mention_position
from .models import (
    AnalysisResult,
    BrandResult,
    ConfidenceLevel,
    PromptResponsePair,
    PromptResult,
)
from .patterns import PatternCache

logger = logging.getLogger(__name__)

# Sample-size thresholds for confidence classification
DIRECTIONAL_MIN_PROMPTS = 5
HIGH_MIN_PROMPTS = 30


@dataclass
class BrandTally:
    """Running per-brand totals while prompts are being processed."""

    mentions: int = 0
    prompt_indices: set[int] = field(default_factory=set)
    first_mentions: int = 0
    contexts: list[str] = field(default_factory=list)


def round_half_up(value: float, digits: int) -> float:
    """
    Round a non-negative value half-up to `digits` decimals.

    Python's round() uses banker's rounding (round(0.25, 1) == 0.2); stored
    results were produced with half-up rounding (0.25 -> 0.3), so metrics use
    this instead.
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def confidence_level(total_prompts: int) -> ConfidenceLevel:
    """
    Classify result reliability from sample size.

    < 5 prompts: low (exploratory); 5-29: directional; 30+: high.

    Example:
        >>> confidence_level(4), confidence_level(5), confidence_level(30)
        (<ConfidenceLevel.LOW: 'low'>, <ConfidenceLevel.DIRECTIONAL: 'directional'>, <ConfidenceLevel.HIGH: 'high'>)
    """
    if total_prompts < DIRECTIONAL_MIN_PROMPTS:
        return ConfidenceLevel.LOW
    if total_prompts < HIGH_MIN_PROMPTS:
        return ConfidenceLevel.DIRECTIONAL
    return ConfidenceLevel.HIGH


def _coerce_pair(item: Any) -> PromptResponsePair:
    if isinstance(item, PromptResponsePair):
        return item
    if isinstance(item, Mapping):
        return PromptResponsePair(item.get("prompt") or "", item.get("response") or "")
    prompt, response = item
    return PromptResponsePair(prompt or "", response or "")


def analyze_prompt(
    index: int,
    pair: PromptResponsePair,
    brand_names: Sequence[str],
    patterns: PatternCache,
    tallies: dict[str, BrandTally],
    citations: CitationTally,
) -> PromptResult:
    """
    Analyze one prompt/response pair and fold it into the running totals.

    Ties for the earliest match position go to the alphabetically-first
    brand name, so the winner never depends on brand-input order.

    Args:
        index: Position of the pair in the input (identifies the prompt)
        pair: Prompt and response text
        brand_names: Tracked brands, in input order
        patterns: Pattern cache owned by the current analyze() call
        tallies: Running per-brand totals, updated in place
        citations: Run-wide URL tally, updated in place

    Returns:
        PromptResult for this pair
    """
    response = pair.response
    brands_mentioned: list[str] = []
    brand_contexts: dict[str, str] = {}
    earliest_position: int | None = None
    earliest_brands: list[str] = []

    for brand in brand_names:
        pattern = patterns.get(brand)
        mentions = count_mentions(response, pattern)
        if mentions == 0:
            continue

        brands_mentioned.append(brand)

        tally = tallies[brand]
        tally.mentions += mentions
        tally.prompt_indices.add(index)

        context = extract_context(response, pattern)
        if context:
            brand_contexts[brand] = context
            add_context(tally.contexts, context)

        position = first_mention_position(response, pattern)
        if position == NOT_FOUND:
            continue
        if earliest_position is None or position < earliest_position:
            earliest_position = position
            earliest_brands = [brand]
        elif position == earliest_position:
            earliest_brands.append(brand)

    first_mention = min(earliest_brands) if earliest_brands else None
    if first_mention is not None:
        tallies[first_mention].first_mentions += 1

    urls = extract_urls(response)
    citations.add(urls)

    return PromptResult(
        prompt=pair.prompt,
        response=response,
        brands_mentioned=brands_mentioned,
        brand_contexts=brand_contexts,
        urls=urls,
        first_mention=first_mention,
    )


def build_brand_result(
    name: str, tally: BrandTally, total_prompts: int, total_mentions: int
) -> BrandResult:
    """
    Derive the visibility metrics for one brand.

    Every ratio short-circuits to 0 when its denominator is 0.
    """
    prompts_with_brand = len(tally.prompt_indices)

    prompt_coverage = (
        prompts_with_brand / total_prompts * 100 if total_prompts > 0 else 0.0
    )
    mention_share = (
        tally.mentions / total_mentions * 100 if total_mentions > 0 else 0.0
    )
    mentions_per_prompt = (
        tally.mentions / prompts_with_brand if prompts_with_brand > 0 else 0.0
    )
    first_mention_rate = (
        tally.first_mentions / prompts_with_brand * 100
        if prompts_with_brand > 0
        else 0.0
    )

    return BrandResult(
        name=name,
        mentions=tally.mentions,
        prompts_with_brand=prompts_with_brand,
        first_mentions=tally.first_mentions,
        prompt_coverage=round_half_up(prompt_coverage, 1),
        mention_share=round_half_up(mention_share, 1),
        mentions_per_prompt=round_half_up(mentions_per_prompt, 2),
        first_mention_rate=round_half_up(first_mention_rate, 1),
        missed_prompts=total_prompts - prompts_with_brand,
        contexts=list(tally.contexts),
    )


def rank_brands(brands: Iterable[BrandResult]) -> list[BrandResult]:
    """
    Sort brands by prompt coverage (desc), mentions (desc), then name (asc).
    """
    return sorted(brands, key=lambda b: (-b.prompt_coverage, -b.mentions, b.name))


def analyze(
    category: str,
    brand_names: Sequence[str],
    prompt_results: Iterable[PromptResponsePair | tuple[str, str] | Mapping[str, str]],
) -> AnalysisResult:
    """
    Analyze model responses for brand visibility.

    This is the engine's single entry point. It never raises for
    well-typed input: empty brand lists, empty prompt lists, empty responses
    and unparsable URLs all degrade to zero or empty outputs.

    Args:
        category: Product category the prompts were about
        brand_names: Brands to score. Every brand gets a result, even if never
            mentioned. Duplicate names are collapsed to the first occurrence.
        prompt_results: Prompt/response pairs as PromptResponsePair, 2-tuples,
            or mappings with "prompt" and "response" keys

    Returns:
        AnalysisResult with ranked brands, per-prompt annotations in input
        order, and the top 20 citations

    Example:
        >>> result = analyze(
        ...     "test",
        ...     ["Alpha", "Beta", "Gamma"],
        ...     [
        ...         ("p1", "Alpha Alpha Beta"),
        ...         ("p2", "Beta Alpha"),
        ...         ("p3", "Alpha Beta Gamma"),
        ...         ("p4", "Gamma Gamma Gamma"),
        ...         ("p5", "Nothing here"),
        ...     ],
        ... )
        >>> result.total_mentions
        11
        >>> [(b.name, b.prompt_coverage) for b in result.brands]
        [('Alpha', 60.0), ('Beta', 60.0), ('Gamma', 40.0)]
    """
    brands = list(dict.fromkeys(brand_names))
    pairs = [_coerce_pair(item) for item in prompt_results]

    patterns = PatternCache()
    tallies = {brand: BrandTally() for brand in brands}
    citations = CitationTally()

    prompts = [
        analyze_prompt(index, pair, brands, patterns, tallies, citations)
        for index, pair in enumerate(pairs)
    ]

    total_prompts = len(pairs)
    total_mentions = sum(tally.mentions for tally in tallies.values())

    brand_results = rank_brands(
        build_brand_result(brand, tallies[brand], total_prompts, total_mentions)
        for brand in brands
    )

    logger.debug(
        f"Analyzed {total_prompts} prompts for {len(brands)} brands in "
        f"category '{category}': {total_mentions} mentions, "
        f"{len(citations)} distinct URLs"
    )

    return AnalysisResult(
        category=category,
        brands=brand_results,
        prompts=prompts,
        citations=rank_citations(citations),
        total_mentions=total_mentions,
        total_prompts=total_prompts,
        confidence_level=confidence_level(total_prompts),
    )
