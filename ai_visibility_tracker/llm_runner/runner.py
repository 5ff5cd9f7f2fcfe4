"""
Core orchestration for AI Visibility Tracker.

This module implements run_analysis(), the complete workflow behind the
`run` command: build prompts, query the model, analyze the answers, write
artifacts and record the analysis in SQLite history.

Key responsibilities:
- Generate run_id from current UTC timestamp
- Build the prompt set (custom prompts or category templates)
- Query the model in concurrent batches, preserving prompt order
- Run the analysis engine over the collected answers
- Write analysis.json, run_meta.json and report.html
- Insert the analysis into the history database
- Return a structured summary dict

Example:
    >>> from ai_visibility_tracker.config.loader import load_config
    >>> config = load_config("examples/tracker.config.yaml")
    >>> summary = asyncio.run(run_analysis(config))
    >>> summary["run_id"]
    '2025-11-02T08-00-00Z'
"""

import asyncio
import logging
import sqlite3
from collections.abc import Callable, Sequence

from ..analyzer import AnalysisResult, PromptResponsePair, analyze
from ..config.constants import PROMPT_TEMPLATES
from ..config.schema import RuntimeConfig
from ..exceptions import DatabaseError, LLMProviderError
from ..report.generator import write_report
from ..storage.db import init_db_if_needed, save_analysis
from ..storage.writer import create_run_directory, write_analysis, write_run_meta
from ..utils.time import run_id_from_timestamp, utc_now
from .models import LLMClient, LLMResponse, build_client

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def generate_prompts(category: str) -> list[str]:
    """
    Build the standard prompt set for a category.

    Args:
        category: Product category (e.g., "CRM software")

    Returns:
        One prompt per template, in template order

    Example:
        >>> generate_prompts("CRM software")[1]
        "Top 5 CRM software for startups - include the direct URLs to each product's homepage."
    """
    category = category.strip()
    return [template.format(category=category) for template in PROMPT_TEMPLATES]


async def collect_responses(
    client: LLMClient,
    prompts: Sequence[str],
    batch_size: int = 10,
    progress_callback: ProgressCallback | None = None,
) -> list[PromptResponsePair]:
    """
    Query the model for every prompt and pair each answer with its prompt.

    Batches run one after another; prompts inside a batch are sent
    concurrently. A single failed prompt aborts the collection, since an
    analysis over a partial sample would misstate coverage.

    Args:
        client: Any LLMClient implementation
        prompts: Prompts to send
        batch_size: Maximum concurrent requests (>= 1)
        progress_callback: Called with (completed, total) after each batch

    Returns:
        PromptResponsePair list in the same order as prompts

    Raises:
        ValueError: If batch_size < 1
        LLMProviderError: If any prompt fails. The original exception is
            chained as __cause__.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    total = len(prompts)
    pairs: list[PromptResponsePair] = []

    for start in range(0, total, batch_size):
        batch = list(prompts[start : start + batch_size])
        logger.debug(
            f"Querying batch {start // batch_size + 1} "
            f"({len(batch)} prompts, {start}/{total} done)"
        )

        results = await asyncio.gather(
            *(client.generate_answer(prompt) for prompt in batch),
            return_exceptions=True,
        )

        for prompt, outcome in zip(batch, results):
            if isinstance(outcome, BaseException):
                logger.error(f"Query failed for prompt '{prompt[:50]}': {outcome}")
                if isinstance(outcome, LLMProviderError):
                    raise outcome
                raise LLMProviderError(
                    f"Failed to get a response for prompt '{prompt[:50]}': {outcome}"
                ) from outcome

            response: LLMResponse = outcome
            pairs.append(PromptResponsePair(prompt, response.answer_text))

        if progress_callback is not None:
            progress_callback(len(pairs), total)

    logger.info(f"Collected {len(pairs)} responses")
    return pairs


def _persist_history(
    db_path: str,
    result: AnalysisResult,
    run_id: str,
    timestamp_utc: str,
    provider: str,
    model_name: str,
) -> int | None:
    """Record the analysis in SQLite history; failures are logged, not raised."""
    try:
        init_db_if_needed(db_path)
        with sqlite3.connect(db_path) as conn:
            analysis_id = save_analysis(
                conn,
                result,
                run_id=run_id,
                timestamp_utc=timestamp_utc,
                provider=provider,
                model_name=model_name,
            )
    except (DatabaseError, sqlite3.Error, OSError) as e:
        logger.error(f"Failed to save analysis to history database: {e}", exc_info=True)
        return None
    return analysis_id


async def run_analysis(
    config: RuntimeConfig,
    client: LLMClient | None = None,
    progress_callback: ProgressCallback | None = None,
) -> dict:
    """
    Execute one complete visibility run.

    Args:
        config: Validated runtime configuration from load_config()
        client: Optional LLMClient. Defaults to build_client(config.provider);
            tests and the demo command pass a MockLLMClient.
        progress_callback: Forwarded to collect_responses()

    Returns:
        dict with keys:
            - run_id: Run identifier (also the run directory name)
            - timestamp_utc: ISO 8601 start time
            - output_dir: Run directory holding the artifacts
            - analysis_id: History row id, or None if persistence failed
            - result: The AnalysisResult

    Raises:
        LLMProviderError: If any model query fails (nothing is written)
        OSError: If artifacts cannot be written
    """
    started = utc_now()
    run_id = run_id_from_timestamp(started)
    timestamp_utc = started.strftime("%Y-%m-%dT%H:%M:%SZ")

    if client is None:
        client = build_client(config.provider)

    prompts = list(config.prompts) or generate_prompts(config.category)
    logger.info(
        f"Starting run {run_id}: {len(prompts)} prompts, "
        f"{len(config.brands)} brands, provider={config.provider.name}"
    )

    pairs = await collect_responses(
        client,
        prompts,
        batch_size=config.run_settings.batch_size,
        progress_callback=progress_callback,
    )

    result = analyze(config.category, config.brands, pairs)

    run_dir = create_run_directory(config.run_settings.output_dir, run_id)
    run_meta = {
        "run_id": run_id,
        "timestamp_utc": timestamp_utc,
        "category": config.category,
        "brands": list(config.brands),
        "provider": config.provider.name,
        "model_name": config.provider.model_name,
        "total_prompts": result.total_prompts,
        "total_mentions": result.total_mentions,
        "confidence_level": str(result.confidence_level),
        "custom_prompts": bool(config.prompts),
    }
    write_analysis(run_dir, result)
    write_run_meta(run_dir, run_meta)
    write_report(run_dir, result, run_meta)

    analysis_id = _persist_history(
        config.run_settings.sqlite_db_path,
        result,
        run_id,
        timestamp_utc,
        config.provider.name,
        config.provider.model_name,
    )

    logger.info(
        f"Run {run_id} complete: {result.total_mentions} mentions across "
        f"{result.total_prompts} prompts"
    )

    return {
        "run_id": run_id,
        "timestamp_utc": timestamp_utc,
        "output_dir": run_dir,
        "analysis_id": analysis_id,
        "result": result,
    }
