"""
Display labels for prompt coverage.

Used by the console leaderboard and the HTML report; the label is never part
of the stored wire format.
"""

from typing import Literal

from ..config.constants import VISIBILITY_THRESHOLDS

VisibilityLevel = Literal["high", "medium", "low"]


def visibility_level(prompt_coverage: float) -> VisibilityLevel:
    """
    Label a prompt coverage percentage.

    Example:
        >>> visibility_level(60.0), visibility_level(45.5), visibility_level(10.0)
        ('high', 'medium', 'low')
    """
    if prompt_coverage >= VISIBILITY_THRESHOLDS["high"]:
        return "high"
    if prompt_coverage >= VISIBILITY_THRESHOLDS["medium"]:
        return "medium"
    return "low"
