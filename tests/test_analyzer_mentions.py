"""
Tests for analyzer.mentions module.

Tests cover:
- Non-overlapping mention counting
- Exact and CamelCase-spaced alternatives never double count
- First mention position
- Unmatchable (None) patterns and empty text
"""

from ai_visibility_tracker.analyzer.mentions import (
    NOT_FOUND,
    MentionSpan,
    count_mentions,
    first_mention_position,
    locate_mentions,
)
from ai_visibility_tracker.analyzer.patterns import create_brand_pattern


class TestLocateMentions:
    """Test suite for locate_mentions()."""

    def test_locates_all_matches_in_order(self):
        spans = locate_mentions("HubSpot vs hubspot", create_brand_pattern("HubSpot"))

        assert spans == [MentionSpan(start=0, length=7), MentionSpan(start=11, length=7)]

    def test_span_end(self):
        span = MentionSpan(start=4, length=7)

        assert span.end == 11

    def test_spaced_variant_has_its_own_length(self):
        spans = locate_mentions("Try Hub Spot", create_brand_pattern("HubSpot"))

        assert spans == [MentionSpan(start=4, length=8)]

    def test_none_pattern_never_matches(self):
        assert locate_mentions("anything", None) == []

    def test_empty_text(self):
        assert locate_mentions("", create_brand_pattern("HubSpot")) == []


class TestCountMentions:
    """Test suite for count_mentions()."""

    def test_brand_counted_once(self):
        assert count_mentions("Brand", create_brand_pattern("Brand")) == 1

    def test_plural_form_not_counted(self):
        assert count_mentions("Brand and Brands", create_brand_pattern("Brand")) == 1

    def test_exact_and_spaced_forms_counted_separately(self):
        text = "OpenAI, also written Open AI"

        assert count_mentions(text, create_brand_pattern("OpenAI")) == 2

    def test_counts_repeated_mentions(self):
        text = "Alpha Alpha Beta"

        assert count_mentions(text, create_brand_pattern("Alpha")) == 2
        assert count_mentions(text, create_brand_pattern("Beta")) == 1

    def test_markdown_emphasis_does_not_block_match(self):
        assert count_mentions("**HubSpot** wins", create_brand_pattern("HubSpot")) == 1


class TestFirstMentionPosition:
    """Test suite for first_mention_position()."""

    def test_returns_offset_of_first_match(self):
        text = "Salesforce first, then HubSpot, then HubSpot again"

        assert first_mention_position(text, create_brand_pattern("HubSpot")) == 23

    def test_not_found(self):
        assert first_mention_position("nothing", create_brand_pattern("HubSpot")) == NOT_FOUND

    def test_none_pattern(self):
        assert first_mention_position("HubSpot", None) == NOT_FOUND
