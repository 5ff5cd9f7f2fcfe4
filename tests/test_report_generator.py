"""
Tests for report.generator module.

Tests cover:
- Headline metrics and tied leaders
- HTML rendering with escaped untrusted text
- Empty-state rendering
- Writing report.html into a run directory
"""

from pathlib import Path

import pytest

from ai_visibility_tracker.analyzer import PromptResponsePair, analyze
from ai_visibility_tracker.report.generator import (
    generate_report,
    summarize_metrics,
    write_report,
)


@pytest.fixture
def result():
    return analyze(
        "CRM software",
        ["HubSpot", "Salesforce", "Pipedrive"],
        [
            PromptResponsePair("Best CRM?", "HubSpot first, then Salesforce. https://hubspot.com"),
            PromptResponsePair("Cheapest CRM?", "Pipedrive is cheap."),
            PromptResponsePair("Startup CRM?", "HubSpot again."),
        ],
    )


class TestSummarizeMetrics:
    def test_single_leader(self, result):
        metrics = summarize_metrics(result)

        assert metrics["prompts_analyzed"] == 3
        assert metrics["total_mentions"] == result.total_mentions
        assert metrics["leaders"] == ["HubSpot"]
        assert metrics["leading_display"] == "HubSpot"
        assert metrics["leader_coverage"] == 66.7
        assert metrics["average_coverage"] == pytest.approx((66.7 + 33.3 + 33.3) / 3)

    def test_tied_leaders(self):
        tied = analyze(
            "CRM software",
            ["Alpha", "Beta"],
            [PromptResponsePair("q1", "Alpha and Beta"), PromptResponsePair("q2", "Beta, Alpha")],
        )

        metrics = summarize_metrics(tied)

        assert sorted(metrics["leaders"]) == ["Alpha", "Beta"]
        assert metrics["leading_display"].endswith("(tied)")

    def test_no_brands(self):
        metrics = summarize_metrics(analyze("CRM software", [], []))

        assert metrics["leaders"] == []
        assert metrics["leading_display"] == "-"
        assert metrics["leader_coverage"] is None
        assert metrics["average_coverage"] == 0.0


class TestGenerateReport:
    def test_contains_sections(self, result):
        html = generate_report(
            result,
            {"run_id": "2025-11-02T08-00-00Z", "provider": "openai", "model_name": "gpt-4o-mini"},
        )

        assert html.startswith("<!DOCTYPE html>")
        assert "AI Visibility Report: CRM software" in html
        assert "2025-11-02T08-00-00Z" in html
        assert "gpt-4o-mini" in html
        assert "Low confidence" in html
        assert "https://hubspot.com" in html
        assert "First Mention" in html

    def test_escapes_untrusted_text(self):
        hostile = analyze(
            "<b>CRM</b>",
            ["Acme"],
            [PromptResponsePair("q", "Acme <script>alert('xss')</script>")],
        )

        html = generate_report(hostile)

        assert "<script>alert" not in html
        assert "&lt;script&gt;" in html
        assert "<b>CRM</b>" not in html

    def test_empty_states(self):
        html = generate_report(analyze("CRM software", [], []))

        assert "No data available" in html
        assert "No citations found" in html
        assert "No prompts analyzed" in html

    def test_prompt_without_brands(self):
        html = generate_report(analyze("CRM", ["Acme"], [PromptResponsePair("q", "nothing")]))

        assert "No tracked brands mentioned" in html


class TestWriteReport:
    def test_writes_report_html(self, tmp_path, result):
        path = write_report(str(tmp_path), result, {"run_id": "run-1"})

        assert Path(path) == tmp_path / "report.html"
        assert "HubSpot" in Path(path).read_text(encoding="utf-8")
