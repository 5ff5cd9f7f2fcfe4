"""
HTML report generation module for AI Visibility Tracker.

Key exports:
    - generate_report: Render an analysis into a self-contained HTML string
    - write_report: Generate and write report.html into a run directory
    - summarize_metrics: Headline numbers shown above the leaderboard
"""

from .generator import generate_report, summarize_metrics, write_report

__all__ = [
    "generate_report",
    "summarize_metrics",
    "write_report",
]
