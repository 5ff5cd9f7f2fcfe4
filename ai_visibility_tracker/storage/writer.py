"""
File writing utilities for AI Visibility Tracker.

This module handles file I/O for run artifacts: the analysis JSON, run
metadata, the HTML report, and run directory creation.

Key features:
- UTF-8 encoding for all text files
- Pretty-printed JSON (indent=2)
- Errors re-raised with an actionable message
- Uses naming conventions from storage.layout

Example:
    >>> run_dir = create_run_directory("./output", "2025-11-02T08-00-00Z")
    >>> write_analysis(run_dir, result)
    >>> write_run_meta(run_dir, {"run_id": "...", "total_prompts": 10})
"""

import json
import logging
from pathlib import Path

from ..analyzer.models import AnalysisResult
from .layout import (
    get_analysis_path,
    get_report_path,
    get_run_directory,
    get_run_meta_path,
)

logger = logging.getLogger(__name__)


def create_run_directory(output_dir: str, run_id: str) -> str:
    """
    Create run output directory, including parents.

    Args:
        output_dir: Base output directory (e.g., "./output")
        run_id: Run identifier (e.g., "2025-11-02T08-00-00Z")

    Returns:
        Full path to created run directory

    Raises:
        PermissionError: If insufficient permissions to create directory
        OSError: If directory cannot be created (disk full, bad path)
    """
    run_dir = get_run_directory(output_dir, run_id)

    try:
        Path(run_dir).mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        logger.error(f"Permission denied creating directory: {run_dir}", exc_info=True)
        raise PermissionError(
            f"Cannot create run directory '{run_dir}': Permission denied. "
            f"Check directory permissions."
        ) from e
    except OSError as e:
        logger.error(f"Failed to create directory: {run_dir}", exc_info=True)
        raise OSError(
            f"Cannot create run directory '{run_dir}': {e}. "
            f"Check disk space and permissions."
        ) from e

    logger.info(f"Created run directory: {run_dir}")
    return run_dir


def write_json(filepath: str, data: dict | list) -> None:
    """
    Write data to a JSON file with UTF-8 encoding.

    Uses indent=2 and ensure_ascii=False so brand names and answers with
    non-ASCII characters stay readable.

    Raises:
        TypeError: If data is not JSON-serializable
        OSError: If file cannot be written
    """
    try:
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except TypeError as e:
        logger.error(f"Cannot serialize data to JSON: {e}", exc_info=True)
        raise TypeError(
            f"Cannot write JSON to '{filepath}': Data is not JSON-serializable. {e}"
        ) from e
    except OSError as e:
        logger.error(f"Failed to write JSON file: {filepath}", exc_info=True)
        raise OSError(
            f"Cannot write JSON file '{filepath}': {e}. "
            f"Check disk space and permissions."
        ) from e

    logger.debug(f"Wrote JSON file: {filepath}")


def write_analysis(run_dir: str, result: AnalysisResult) -> str:
    """
    Write the analysis wire dict to analysis.json.

    Returns:
        Path of the written file
    """
    filepath = get_analysis_path(run_dir)
    write_json(filepath, result.to_dict())
    return filepath


def write_run_meta(run_dir: str, meta: dict) -> str:
    """Write run metadata summary to run_meta.json and return its path."""
    filepath = get_run_meta_path(run_dir)
    write_json(filepath, meta)
    return filepath


def write_report_html(run_dir: str, html: str) -> str:
    """
    Write the rendered HTML report to report.html.

    Raises:
        OSError: If file cannot be written
    """
    filepath = get_report_path(run_dir)
    try:
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(html)
    except OSError as e:
        logger.error(f"Failed to write HTML report: {filepath}", exc_info=True)
        raise OSError(
            f"Cannot write HTML report '{filepath}': {e}. "
            f"Check disk space and permissions."
        ) from e

    logger.debug(f"Wrote HTML report: {filepath}")
    return filepath


def read_analysis(run_dir: str) -> AnalysisResult:
    """
    Load a previously written analysis.json.

    Raises:
        FileNotFoundError: If the run has no analysis.json
        ValueError: If the file is not valid JSON
    """
    with open(get_analysis_path(run_dir), encoding="utf-8") as f:
        return AnalysisResult.from_dict(json.load(f))
