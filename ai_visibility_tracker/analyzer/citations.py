"""
URL and citation extraction for AI Visibility Tracker.

Finds the URLs a model cited in its response and tallies them across an
analysis run.

Extraction order (avoids counting a markdown link twice):
1. Markdown links [label](https://...) are collected first
2. Their spans are removed from the text
3. Bare http(s):// URLs are collected from what remains
4. Results are deduplicated by exact string, first-seen order

Trailing sentence punctuation (.,;:!?) is stripped from every URL.
"""

import re
from urllib.parse import urlsplit

from .models import CitationResult

MAX_CITATIONS = 20

MARKDOWN_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\((https?://[^)\s]+)\)", re.IGNORECASE)
BARE_URL_PATTERN = re.compile(r"https?://[^\s)\]>\"']+", re.IGNORECASE)
TRAILING_PUNCTUATION = re.compile(r"[.,;:!?]+$")


def _clean_url(url: str) -> str:
    return TRAILING_PUNCTUATION.sub("", url)


def extract_urls(text: str) -> list[str]:
    """
    Extract deduplicated URLs from response text.

    Args:
        text: Response text, possibly containing markdown

    Returns:
        URLs in first-seen order (markdown links before bare URLs)

    Example:
        >>> extract_urls("See [HubSpot](https://hubspot.com). Also https://hubspot.com.")
        ['https://hubspot.com']
    """
    if not text:
        return []

    urls: dict[str, None] = {}

    for match in MARKDOWN_LINK_PATTERN.finditer(text):
        url = _clean_url(match.group(2))
        if url:
            urls.setdefault(url)

    residual = MARKDOWN_LINK_PATTERN.sub(" ", text)

    for match in BARE_URL_PATTERN.finditer(residual):
        url = _clean_url(match.group(0))
        if url:
            urls.setdefault(url)

    return list(urls)


def get_domain(url: str) -> str:
    """
    Derive a display domain from a URL.

    Returns the lowercase hostname without a leading "www.". Unparsable URLs
    (or URLs without a hostname) fall back to the raw URL string.

    Example:
        >>> get_domain("https://www.HubSpot.com/pricing")
        'hubspot.com'
        >>> get_domain("http://[broken")
        'http://[broken'
    """
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return url

    if not hostname:
        return url

    return hostname.removeprefix("www.")


class CitationTally:
    """
    Run-wide URL occurrence counts.

    Each response contributes at most one count per URL (its URL list is
    already deduplicated). Insertion order is kept so ranking ties resolve
    to first-seen order.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}

    def add(self, urls: list[str]) -> None:
        for url in urls:
            self._counts[url] = self._counts.get(url, 0) + 1

    def items(self) -> list[tuple[str, int]]:
        return list(self._counts.items())

    def __len__(self) -> int:
        return len(self._counts)


def rank_citations(
    tally: CitationTally, limit: int = MAX_CITATIONS
) -> list[CitationResult]:
    """
    Rank tallied URLs by count (descending) and keep the top `limit`.

    sorted() is stable, so URLs with equal counts stay in first-seen order.
    """
    ranked = sorted(tally.items(), key=lambda item: -item[1])
    return [
        CitationResult(url=url, domain=get_domain(url), count=count)
        for url, count in ranked[:limit]
    ]
