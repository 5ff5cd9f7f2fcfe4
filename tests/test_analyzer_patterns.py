"""
Tests for analyzer.patterns module.

Tests cover:
- Whole-word, case-insensitive brand matching
- CamelCase brands matching their space-separated variant
- Regex metacharacters in brand names (C++, C#, Monday.com)
- Empty/whitespace brand rejection
- PatternCache memoization
"""

import pytest

from ai_visibility_tracker.analyzer.patterns import (
    PatternCache,
    create_brand_pattern,
    is_camel_case,
    split_camel_case,
)


class TestCamelCaseHelpers:
    """Test suite for CamelCase detection and splitting."""

    def test_is_camel_case(self):
        assert is_camel_case("HubSpot")
        assert is_camel_case("OpenAI")
        assert not is_camel_case("Salesforce")
        assert not is_camel_case("asana")

    def test_split_camel_case(self):
        assert split_camel_case("HubSpot") == ["Hub", "Spot"]
        assert split_camel_case("OpenAI") == ["Open", "AI"]

    def test_split_all_caps_is_single_word(self):
        assert split_camel_case("IBM") == ["IBM"]


class TestCreateBrandPattern:
    """Test suite for create_brand_pattern()."""

    def test_matches_case_insensitively(self):
        pattern = create_brand_pattern("Salesforce")

        assert pattern.search("I recommend SALESFORCE")
        assert pattern.search("salesforce is popular")

    def test_requires_word_boundaries(self):
        pattern = create_brand_pattern("Asana")

        assert not pattern.search("Asanas are yoga poses")
        assert not pattern.search("MyAsana")
        assert pattern.search("Try Asana, it's good")

    def test_camel_case_matches_spaced_variant(self):
        pattern = create_brand_pattern("OpenAI")

        assert pattern.search("I asked Open AI about it")
        assert pattern.search("OpenAI released a model")
        assert not pattern.search("OpenAIs")

    def test_camel_case_spaced_variant_allows_multiple_spaces(self):
        pattern = create_brand_pattern("HubSpot")

        assert pattern.search("Hub  Spot")

    def test_non_camel_case_has_no_spaced_variant(self):
        pattern = create_brand_pattern("Salesforce")

        assert not pattern.search("Sales force")

    def test_escapes_regex_metacharacters(self):
        pattern = create_brand_pattern("C++")

        assert pattern.search("Learn C++ today")
        assert not pattern.search("Learn C today")

    def test_brand_with_dot(self):
        pattern = create_brand_pattern("Monday.com")

        assert pattern.search("Monday.com is great")
        assert not pattern.search("Mondayxcom is great")

    def test_brand_with_trailing_symbol(self):
        pattern = create_brand_pattern("C#")

        assert pattern.search("Written in C#.")

    @pytest.mark.parametrize("brand", ["", "   ", "\t"])
    def test_rejects_empty_brand(self, brand):
        with pytest.raises(ValueError, match="cannot be empty"):
            create_brand_pattern(brand)


class TestPatternCache:
    """Test suite for PatternCache."""

    def test_returns_same_compiled_pattern(self):
        cache = PatternCache()

        assert cache.get("HubSpot") is cache.get("HubSpot")
        assert len(cache) == 1

    def test_blank_brand_maps_to_none(self):
        cache = PatternCache()

        assert cache.get("   ") is None

    def test_clear(self):
        cache = PatternCache()
        cache.get("HubSpot")
        cache.get("Salesforce")

        cache.clear()

        assert len(cache) == 0

    def test_separate_caches_share_nothing(self):
        first = PatternCache()
        second = PatternCache()
        first.get("HubSpot")

        assert len(second) == 0
