"""
Mention location for AI Visibility Tracker.

Finds every non-overlapping occurrence of a compiled brand pattern in a
response. finditer() resumes scanning after the end of each match, so a span
of text is counted at most once even when several pattern alternatives
(exact and CamelCase-spaced) could match it.
"""

import re
from dataclasses import dataclass

# Returned by first_mention_position() when the brand does not appear
NOT_FOUND = -1


@dataclass(frozen=True)
class MentionSpan:
    """Position of one brand match: character offset and matched length."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


def locate_mentions(text: str, pattern: re.Pattern | None) -> list[MentionSpan]:
    """
    Find all non-overlapping brand matches in text.

    Args:
        text: Response text to scan
        pattern: Compiled brand pattern, or None for an unmatchable brand

    Returns:
        Matches ordered by position

    Example:
        >>> locate_mentions("HubSpot vs hubspot", create_brand_pattern("HubSpot"))
        [MentionSpan(start=0, length=7), MentionSpan(start=11, length=7)]
    """
    if pattern is None or not text:
        return []

    return [
        MentionSpan(start=match.start(), length=match.end() - match.start())
        for match in pattern.finditer(text)
    ]


def count_mentions(text: str, pattern: re.Pattern | None) -> int:
    """Count non-overlapping brand matches in text."""
    return len(locate_mentions(text, pattern))


def first_mention_position(text: str, pattern: re.Pattern | None) -> int:
    """
    Return the character offset of the first brand match, or NOT_FOUND (-1).
    """
    if pattern is None or not text:
        return NOT_FOUND

    match = pattern.search(text)
    return match.start() if match else NOT_FOUND
