#!/usr/bin/env python3
"""
Compare AI Visibility Tracker runs programmatically.

This script demonstrates how to:
- Load analysis.json from every run directory
- Follow each brand's prompt coverage across runs
- Spot brands that gained or lost visibility

Usage:
    python examples/analyze_results.py [OUTPUT_DIR]
"""

import sys
from pathlib import Path

from ai_visibility_tracker.analyzer import AnalysisResult
from ai_visibility_tracker.storage.layout import ANALYSIS_FILENAME
from ai_visibility_tracker.storage.writer import read_analysis


def load_runs(output_dir: str = "./output") -> list[tuple[str, AnalysisResult]]:
    """Load (run_id, result) for every run, oldest first."""
    output_path = Path(output_dir)
    if not output_path.exists():
        return []

    # run_id directory names sort chronologically
    run_dirs = sorted(
        d for d in output_path.iterdir() if (d / ANALYSIS_FILENAME).is_file()
    )
    return [(d.name, read_analysis(str(d))) for d in run_dirs]


def coverage_trend(runs: list[tuple[str, AnalysisResult]]) -> dict[str, list[float | None]]:
    """Brand -> prompt coverage per run (None where the brand was not tracked)."""
    brands: dict[str, list[float | None]] = {}
    for index, (_, result) in enumerate(runs):
        for brand in result.brands:
            series = brands.setdefault(brand.name, [None] * len(runs))
            series[index] = brand.prompt_coverage
    return brands


def print_report(runs: list[tuple[str, AnalysisResult]]) -> None:
    print("=" * 80)
    print("AI VISIBILITY TRACKER - RUN COMPARISON")
    print("=" * 80)

    for run_id, result in runs:
        print(
            f"{run_id}  {result.category}: {result.total_prompts} prompts, "
            f"{result.total_mentions} mentions ({result.confidence_level})"
        )

    print("\n" + "-" * 80)
    print("PROMPT COVERAGE BY BRAND")
    print("-" * 80)

    for name, series in sorted(coverage_trend(runs).items()):
        values = [v for v in series if v is not None]
        cells = "  ".join("   -  " if v is None else f"{v:5.1f}%" for v in series)
        change = values[-1] - values[0] if len(values) > 1 else 0.0
        print(f"{name:<20} {cells}   change: {change:+.1f}")

    print("=" * 80)


def main():
    output_dir = sys.argv[1] if len(sys.argv) > 1 else "./output"
    runs = load_runs(output_dir)

    if not runs:
        print(f"Error: No runs with {ANALYSIS_FILENAME} found in {output_dir}")
        print("Run 'ai-visibility-tracker run --config CONFIG' first")
        sys.exit(1)

    print_report(runs)


if __name__ == "__main__":
    main()
