"""
Tests for analyzer.citations module.

Tests cover:
- Markdown link and bare URL extraction without double counting
- Trailing punctuation stripping and first-seen deduplication
- Domain normalization and fallback for unparsable URLs
- Citation tally ranking, ties and truncation
"""

from ai_visibility_tracker.analyzer.citations import (
    MAX_CITATIONS,
    CitationTally,
    extract_urls,
    get_domain,
    rank_citations,
)


class TestExtractUrls:
    """Test suite for extract_urls()."""

    def test_bare_urls(self):
        text = "Visit https://hubspot.com and http://salesforce.com for details"

        assert extract_urls(text) == ["https://hubspot.com", "http://salesforce.com"]

    def test_markdown_link_not_double_counted(self):
        text = "See [HubSpot](https://hubspot.com/crm) for pricing."

        assert extract_urls(text) == ["https://hubspot.com/crm"]

    def test_markdown_links_come_before_bare_urls(self):
        text = "Bare https://b.com first, then [A](https://a.com)"

        assert extract_urls(text) == ["https://a.com", "https://b.com"]

    def test_strips_trailing_punctuation(self):
        text = "Go to https://hubspot.com. Or https://zoho.com/crm, or https://asana.com!"

        assert extract_urls(text) == [
            "https://hubspot.com",
            "https://zoho.com/crm",
            "https://asana.com",
        ]

    def test_url_in_parentheses(self):
        assert extract_urls("(https://www.pipedrive.com/en/pricing)") == [
            "https://www.pipedrive.com/en/pricing"
        ]

    def test_deduplicates_in_first_seen_order(self):
        text = "https://b.com https://a.com https://b.com"

        assert extract_urls(text) == ["https://b.com", "https://a.com"]

    def test_markdown_and_bare_same_url_deduplicated(self):
        text = "See [HubSpot](https://hubspot.com). Also https://hubspot.com."

        assert extract_urls(text) == ["https://hubspot.com"]

    def test_no_urls(self):
        assert extract_urls("No links here, just www.example.com") == []

    def test_empty_text(self):
        assert extract_urls("") == []


class TestGetDomain:
    """Test suite for get_domain()."""

    def test_strips_www_and_lowercases(self):
        assert get_domain("https://www.HubSpot.com/pricing") == "hubspot.com"

    def test_keeps_subdomains(self):
        assert get_domain("https://app.asana.com/0/home") == "app.asana.com"

    def test_unparsable_url_falls_back_to_raw(self):
        assert get_domain("http://[broken") == "http://[broken"

    def test_missing_hostname_falls_back_to_raw(self):
        assert get_domain("https://") == "https://"


class TestRankCitations:
    """Test suite for CitationTally and rank_citations()."""

    def test_counts_once_per_response(self):
        tally = CitationTally()
        tally.add(["https://a.com", "https://b.com"])
        tally.add(["https://a.com"])

        ranked = rank_citations(tally)

        assert [(c.url, c.count) for c in ranked] == [
            ("https://a.com", 2),
            ("https://b.com", 1),
        ]

    def test_ties_keep_first_seen_order(self):
        tally = CitationTally()
        tally.add(["https://z.com", "https://a.com", "https://m.com"])

        ranked = rank_citations(tally)

        assert [c.url for c in ranked] == ["https://z.com", "https://a.com", "https://m.com"]

    def test_sets_domain(self):
        tally = CitationTally()
        tally.add(["https://www.hubspot.com/crm"])

        assert rank_citations(tally)[0].domain == "hubspot.com"

    def test_truncates_to_top_twenty(self):
        tally = CitationTally()
        tally.add([f"https://site{i}.com" for i in range(25)])
        tally.add(["https://site24.com"])

        ranked = rank_citations(tally)

        assert len(ranked) == MAX_CITATIONS == 20
        assert ranked[0].url == "https://site24.com"
        assert ranked[0].count == 2
        assert ranked[-1].url == "https://site18.com"

    def test_empty_tally(self):
        assert rank_citations(CitationTally()) == []
