"""
HTML report generation for AI Visibility Tracker.

Renders an AnalysisResult into a self-contained HTML report: summary metrics
with the confidence label, the brand leaderboard, top cited sources, and the
per-prompt breakdown with highlighted first mentions.

Key features:
- Jinja2 templating with autoescaping enabled (XSS prevention)
- Self-contained HTML (inline CSS, no external assets)

Security:
- CRITICAL: Jinja2 autoescaping enabled to prevent HTML injection
- Model answers and brand names are untrusted and always escaped

Example:
    >>> html = generate_report(result, {"run_id": "2025-11-02T08-00-00Z"})
    >>> write_report("./output/2025-11-02T08-00-00Z", result, run_meta)
"""

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from ..analyzer.levels import visibility_level
from ..analyzer.models import AnalysisResult, BrandResult, ConfidenceLevel
from ..storage.writer import write_report_html

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "report.html.j2"

CONFIDENCE_LABELS = {
    ConfidenceLevel.LOW: ("Low confidence", "Exploratory (<5 prompts)"),
    ConfidenceLevel.DIRECTIONAL: ("Directional", "5-29 prompts"),
    ConfidenceLevel.HIGH: ("High confidence", "30+ prompts"),
}


def _brand_score(brand: BrandResult) -> tuple[float, float, float]:
    return (brand.prompt_coverage, brand.mention_share, brand.mentions_per_prompt)


def summarize_metrics(result: AnalysisResult) -> dict:
    """
    Headline numbers shown above the leaderboard.

    The leading brand is the one with the best (coverage, share, depth)
    tuple; brands tied on all three are all reported.

    Returns:
        Dict with keys: prompts_analyzed, average_coverage, total_mentions,
        leaders (list of names), leading_display, leader_coverage
    """
    brands = result.brands
    average_coverage = (
        sum(b.prompt_coverage for b in brands) / len(brands) if brands else 0.0
    )

    leaders: list[BrandResult] = []
    if brands:
        best = max(_brand_score(b) for b in brands)
        leaders = [b for b in brands if _brand_score(b) == best]

    if len(leaders) > 1:
        leading_display = f"{', '.join(b.name for b in leaders)} (tied)"
    elif leaders:
        leading_display = leaders[0].name
    else:
        leading_display = "-"

    return {
        "prompts_analyzed": result.total_prompts,
        "average_coverage": average_coverage,
        "total_mentions": result.total_mentions,
        "leaders": [b.name for b in leaders],
        "leading_display": leading_display,
        "leader_coverage": leaders[0].prompt_coverage if leaders else None,
    }


def _build_template_data(result: AnalysisResult, run_meta: dict) -> dict:
    label, description = CONFIDENCE_LABELS[ConfidenceLevel(result.confidence_level)]
    return {
        "result": result,
        "run_meta": run_meta,
        "metrics": summarize_metrics(result),
        "confidence_label": label,
        "confidence_description": description,
        "brand_rows": [
            {"rank": rank, "brand": brand, "level": visibility_level(brand.prompt_coverage)}
            for rank, brand in enumerate(result.brands, start=1)
        ],
    }


def generate_report(result: AnalysisResult, run_meta: dict | None = None) -> str:
    """
    Render the HTML report for one analysis.

    Args:
        result: Analysis to render
        run_meta: Optional run metadata (run_id, timestamp_utc, provider,
            model_name) shown in the header

    Returns:
        HTML string (self-contained, ready to write to file)

    Raises:
        ValueError: If the template cannot be loaded or rendered
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )

    try:
        template = env.get_template(TEMPLATE_NAME)
        html = template.render(**_build_template_data(result, run_meta or {}))
    except TemplateError as e:
        logger.error(f"Failed to render report template: {e}", exc_info=True)
        raise ValueError(f"Cannot render report template: {e}") from e

    logger.debug(f"Rendered HTML report for category '{result.category}'")
    return html


def write_report(run_dir: str, result: AnalysisResult, run_meta: dict | None = None) -> str:
    """
    Generate and write report.html into a run directory.

    Returns:
        Path of the written report

    Raises:
        ValueError: If report generation fails
        OSError: If report cannot be written to disk
    """
    html = generate_report(result, run_meta)
    path = write_report_html(run_dir, html)
    logger.info(f"HTML report written to: {path}")
    return path
