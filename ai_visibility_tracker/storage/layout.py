"""
File naming conventions and path utilities for AI Visibility Tracker.

Output structure:
    output/
        visibility.db
        {run_id}/
            analysis.json
            run_meta.json
            report.html

Example:
    >>> get_run_directory("./output", "2025-11-02T08-00-00Z")
    './output/2025-11-02T08-00-00Z'
"""

import os

ANALYSIS_FILENAME = "analysis.json"
RUN_META_FILENAME = "run_meta.json"
REPORT_FILENAME = "report.html"


def get_run_directory(output_dir: str, run_id: str) -> str:
    """
    Get path to run output directory.

    Does NOT create the directory; use storage.writer.create_run_directory()
    for that.

    Example:
        >>> get_run_directory("/var/data", "test-run")
        '/var/data/test-run'
    """
    return os.path.join(output_dir, run_id)


def get_analysis_path(run_dir: str) -> str:
    """Path of the AnalysisResult wire dict for a run."""
    return os.path.join(run_dir, ANALYSIS_FILENAME)


def get_run_meta_path(run_dir: str) -> str:
    return os.path.join(run_dir, RUN_META_FILENAME)


def get_report_path(run_dir: str) -> str:
    return os.path.join(run_dir, REPORT_FILENAME)
