"""
Context snippet extraction for AI Visibility Tracker.

Produces a short, human-readable excerpt around the first mention of a brand
in a response. This is a best-effort sentence window, not real sentence
segmentation: abbreviations and decimal numbers can cut a snippet short.

Algorithm:
1. Take the first match only
2. Walk back at most `window` characters for the nearest sentence
   terminator (. ! ? or newline); the snippet starts right after it, or at
   the window boundary when none is found
3. Walk forward at most `window` characters for the next terminator; the
   snippet ends right after it, or at the window boundary
4. Trim whitespace and strip markdown emphasis (** and *)
5. Mark truncation with "..." on either side that is not the text boundary
"""

import re

DEFAULT_CONTEXT_WINDOW = 100
MAX_CONTEXTS_PER_BRAND = 5
ELLIPSIS = "..."

SENTENCE_TERMINATORS = frozenset(".!?\n")


def strip_markdown_emphasis(text: str) -> str:
    """
    Remove literal markdown bold/italic markers.

    Example:
        >>> strip_markdown_emphasis("**HubSpot** is *great*")
        'HubSpot is great'
    """
    return text.replace("**", "").replace("*", "")


def _find_snippet_start(text: str, match_start: int, window: int) -> int:
    floor = max(0, match_start - window)
    for index in range(match_start - 1, floor - 1, -1):
        if text[index] in SENTENCE_TERMINATORS:
            return index + 1
    return floor


def _find_snippet_end(text: str, match_end: int, window: int) -> int:
    ceiling = min(len(text), match_end + window)
    for index in range(match_end, ceiling):
        if text[index] in SENTENCE_TERMINATORS:
            return index + 1
    return ceiling


def extract_context(
    text: str, pattern: re.Pattern | None, window: int = DEFAULT_CONTEXT_WINDOW
) -> str | None:
    """
    Extract a snippet around the first brand match in text.

    Args:
        text: Response text
        pattern: Compiled brand pattern, or None
        window: Maximum characters to scan on each side of the match

    Returns:
        Snippet string, or None when the brand does not appear

    Example:
        >>> extract_context(
        ...     "Intro text. **HubSpot** is a solid CRM. Others exist.",
        ...     create_brand_pattern("HubSpot"),
        ... )
        '...HubSpot is a solid CRM....'
    """
    if pattern is None or not text:
        return None

    match = pattern.search(text)
    if match is None:
        return None

    start = _find_snippet_start(text, match.start(), window)
    end = _find_snippet_end(text, match.end(), window)

    snippet = strip_markdown_emphasis(text[start:end].strip())

    if start > 0 and not snippet.startswith(ELLIPSIS):
        snippet = ELLIPSIS + snippet
    if end < len(text) and not snippet.endswith(ELLIPSIS):
        snippet = snippet + ELLIPSIS

    return snippet


def add_context(
    contexts: list[str], snippet: str | None, limit: int = MAX_CONTEXTS_PER_BRAND
) -> bool:
    """
    Append a snippet to a brand's context list unless it is a duplicate or
    the list is full.

    Returns:
        True if the snippet was added
    """
    if not snippet or snippet in contexts or len(contexts) >= limit:
        return False
    contexts.append(snippet)
    return True
