"""Tests for analyzer.levels display labels."""

import pytest

from ai_visibility_tracker.analyzer import visibility_level


class TestVisibilityLevel:
    @pytest.mark.parametrize(
        ("coverage", "expected"),
        [
            (100.0, "high"),
            (60.0, "high"),
            (59.9, "medium"),
            (30.0, "medium"),
            (29.9, "low"),
            (0.0, "low"),
        ],
    )
    def test_thresholds(self, coverage, expected):
        assert visibility_level(coverage) == expected

    def test_not_in_wire_format(self):
        from ai_visibility_tracker.analyzer import PromptResponsePair, analyze

        result = analyze("CRM", ["Acme"], [PromptResponsePair("q", "Acme")])

        assert "level" not in result.to_dict()["brands"][0]
        assert "visibilityLevel" not in result.to_dict()["brands"][0]
