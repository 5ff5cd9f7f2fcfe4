"""
Brand pattern compilation for AI Visibility Tracker.

Compiles a brand name into a case-insensitive regex that only matches the
brand as a whole word, while tolerating the common CamelCase spacing variant
("OpenAI" also matches "Open AI").

Key features:
- Lookaround word boundaries instead of \\b, so names ending in punctuation
  ("C++", "C#") still match
- CamelCase brands also match their words separated by whitespace
- Per-analysis memoization through PatternCache (never module-level state)

Security:
- Always uses re.escape() to prevent regex injection from brand names
"""

import re

# Split points inside a brand name: a lowercase letter or digit followed by
# an uppercase letter ("OpenAI" -> "Open", "AI"; "HubSpot" -> "Hub", "Spot")
CAMEL_CASE_SPLIT = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

WORD_START = r"(?<!\w)"
WORD_END = r"(?!\w)"


def is_camel_case(brand: str) -> bool:
    """
    Check whether a brand name has an uppercase letter after position 0.

    Example:
        >>> is_camel_case("OpenAI")
        True
        >>> is_camel_case("Salesforce")
        False
    """
    return any(char.isupper() for char in brand[1:])


def split_camel_case(brand: str) -> list[str]:
    """
    Split a CamelCase brand name into its words.

    Example:
        >>> split_camel_case("HubSpot")
        ['Hub', 'Spot']
        >>> split_camel_case("IBM")
        ['IBM']
    """
    return [part for part in CAMEL_CASE_SPLIT.split(brand) if part]


def create_brand_pattern(brand: str) -> re.Pattern:
    """
    Create a word-boundary regex pattern for a brand name.

    The exact (escaped) brand is always the first alternative. When the brand
    is CamelCase and splits into several words, a second alternative accepts
    those words separated by one or more whitespace characters. Alternatives
    never match the same span twice because scanning with finditer() advances
    past each match.

    Args:
        brand: Brand name to create pattern for (e.g., "HubSpot", "C++")

    Returns:
        Compiled case-insensitive pattern

    Raises:
        ValueError: If brand is empty or whitespace

    Example:
        >>> pattern = create_brand_pattern("OpenAI")
        >>> bool(pattern.search("I asked Open AI about it"))
        True
        >>> bool(pattern.search("OpenAIs"))
        False
        >>> bool(create_brand_pattern("C++").search("Learn C++ today"))
        True
    """
    if not brand or brand.isspace():
        raise ValueError("Brand name cannot be empty or whitespace")

    alternatives = [re.escape(brand)]

    if is_camel_case(brand):
        words = split_camel_case(brand)
        if len(words) > 1:
            alternatives.append(r"\s+".join(re.escape(word) for word in words))

    pattern = WORD_START + "(?:" + "|".join(alternatives) + ")" + WORD_END
    return re.compile(pattern, re.IGNORECASE)


class PatternCache:
    """
    Memoizes compiled brand patterns for the duration of one analysis.

    A new cache is created by every analyze() call and passed down
    explicitly, so concurrent analyses never share state.

    Brands that cannot be compiled (empty or whitespace names) map to None,
    which the mention locator treats as "never matches".

    Example:
        >>> cache = PatternCache()
        >>> cache.get("HubSpot") is cache.get("HubSpot")
        True
        >>> cache.get("   ") is None
        True
    """

    def __init__(self) -> None:
        self._patterns: dict[str, re.Pattern | None] = {}

    def get(self, brand: str) -> re.Pattern | None:
        if brand not in self._patterns:
            try:
                self._patterns[brand] = create_brand_pattern(brand)
            except ValueError:
                self._patterns[brand] = None
        return self._patterns[brand]

    def clear(self) -> None:
        self._patterns.clear()

    def __len__(self) -> int:
        return len(self._patterns)
