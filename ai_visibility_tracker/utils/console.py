"""
Rich console utilities for dual-mode CLI output.

Provides readable terminal output for humans and structured JSON for scripts
and agents. All output functions adapt to the global output_mode setting.

This module provides:
- OutputMode: Output format (text/json) and quiet flag
- Context managers: spinner(), create_progress_bar()
- Output functions: success(), error(), warning(), info()
- Display functions: print_banner(), print_leaderboard(), print_citations(),
  print_prompt_breakdown(), print_history(), print_final_summary()

Human Mode (--format text):
    - Rich spinners, progress bars, colored tables and panels

Agent Mode (--format json):
    - Messages and results buffered, then written as one JSON object
    - No ANSI codes or spinners

Quiet Mode (--quiet):
    - Tab-separated values, no decorations

Examples:
    >>> output_mode.format = "text"
    >>> with spinner("Loading..."):
    ...     config = load_config(path)
    >>> success("Config loaded successfully")

    >>> output_mode.format = "json"
    >>> success("Config loaded")   # Buffers to JSON
    >>> output_mode.flush_json()   # Outputs JSON to stdout
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from ..analyzer.levels import visibility_level

if TYPE_CHECKING:
    from ..analyzer.models import AnalysisResult

LEVEL_STYLES = {"high": "green", "medium": "yellow", "low": "red"}


class OutputMode:
    """
    Output mode configuration for dual-mode CLI.

    Attributes:
        format: Output format - "text" (human) or "json" (agent)
        quiet: If True, suppress non-essential output
        _json_buffer: Internal buffer for JSON output in agent mode

    Examples:
        >>> mode = OutputMode()
        >>> mode.is_human()
        True
        >>> mode.format = "json"
        >>> mode.is_agent()
        True
    """

    def __init__(self, format_type: str = "text", quiet: bool = False):
        """
        Raises:
            ValueError: If format_type is not "text" or "json"
        """
        if format_type not in ["text", "json"]:
            raise ValueError(f"Invalid format: {format_type}. Must be 'text' or 'json'")

        self.format = format_type
        self.quiet = quiet
        self._json_buffer: dict[str, Any] = {}

    def is_human(self) -> bool:
        return self.format == "text"

    def is_agent(self) -> bool:
        return self.format == "json"

    def add_json(self, key: str, value: Any) -> None:
        """Add key-value pair to the JSON buffer (flushed by flush_json())."""
        self._json_buffer[key] = value

    def flush_json(self) -> None:
        """
        Output buffered JSON to stdout and clear the buffer.

        No-op in human mode or when nothing was buffered.
        """
        if self.is_agent() and self._json_buffer:
            json.dump(self._json_buffer, sys.stdout, indent=2, ensure_ascii=False)
            sys.stdout.write("\n")
            sys.stdout.flush()
            self._json_buffer.clear()

    def reset(self) -> None:
        """Restore defaults; the CLI calls this at the start of every command."""
        self.format = "text"
        self.quiet = False
        self._json_buffer.clear()


# Global output mode instance (set by CLI flags)
output_mode = OutputMode()

# Global Rich console instances for human mode
console = Console()  # stdout
console_err = Console(stderr=True)  # stderr


@contextmanager
def spinner(message: str):
    """
    Show a spinner during an operation in human mode; silent otherwise.

    Examples:
        >>> with spinner("Querying model..."):
        ...     response = await client.generate_answer(prompt)
    """
    if output_mode.is_human() and not output_mode.quiet:
        with console.status(f"[bold blue]{message}", spinner="dots") as status:
            yield status
    else:
        yield None


def create_progress_bar() -> Progress | NoOpProgress:
    """
    Create a progress bar for tracking prompt collection.

    Returns a Rich Progress instance in human mode and a NoOpProgress in
    agent/quiet modes so callers never need mode checks.
    """
    if output_mode.is_human() and not output_mode.quiet:
        return Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
            transient=True,
        )
    return NoOpProgress()


class NoOpProgress:
    """Progress stand-in with the same interface as rich Progress; does nothing."""

    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass

    def add_task(self, description: str, total: float | None = None, **kwargs) -> int:
        return 0

    def advance(self, task_id: int, advance: float = 1.0) -> None:
        pass

    def update(self, task_id: int, **kwargs) -> None:
        pass


def success(message: str) -> None:
    """
    Print a success message.

    Human mode: Green checkmark with message
    Agent mode: Buffer {"status": "success", "message": ...}
    """
    if output_mode.is_human():
        if not output_mode.quiet:
            console.print(f"[green]✓[/green] {message}")
    elif output_mode.is_agent():
        output_mode.add_json("status", "success")
        output_mode.add_json("message", message)


def error(message: str) -> None:
    """
    Print an error message.

    Human mode: Red X with message to stderr (shown even when quiet)
    Agent mode: Buffer {"status": "error", "error": ...}
    """
    if output_mode.is_human():
        console_err.print(f"[red]✗[/red] {message}", style="red", markup=False)
    elif output_mode.is_agent():
        output_mode.add_json("status", "error")
        output_mode.add_json("error", message)


def warning(message: str) -> None:
    """Print a warning (human mode) or buffer it under "warning" (agent mode)."""
    if output_mode.is_human():
        if not output_mode.quiet:
            console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")
    elif output_mode.is_agent():
        output_mode.add_json("warning", message)


def info(message: str) -> None:
    """Print an info message in human mode. Silent for agents and quiet mode."""
    if output_mode.is_human() and not output_mode.quiet:
        console.print(f"[blue]ℹ[/blue] {message}")


def print_banner(version: str) -> None:
    """Print the startup banner in human mode."""
    if not output_mode.is_human() or output_mode.quiet:
        return

    banner = f"""
[bold cyan]╔{"═" * 39}╗
║   AI Visibility Tracker v{version:<12} ║
║   How often do AI answers name you?   ║
╚{"═" * 39}╝[/bold cyan]
"""
    console.print(banner)


def print_leaderboard(result: AnalysisResult) -> None:
    """
    Print the ranked brand table.

    Human mode: Rich table with coverage colored by visibility level
    Agent mode: Buffer the full analysis wire dict under "analysis"
    Quiet mode: One tab-separated line per brand (name, coverage, share,
        depth, first-mention rate, mentions)
    """
    if output_mode.is_agent():
        output_mode.add_json("analysis", result.to_dict())
        return

    if output_mode.quiet:
        for brand in result.brands:
            print(
                f"{brand.name}\t{brand.prompt_coverage}\t{brand.mention_share}\t"
                f"{brand.mentions_per_prompt}\t{brand.first_mention_rate}\t{brand.mentions}"
            )
        return

    table = Table(
        title=f"Brand Leaderboard: {result.category}",
        box=box.ROUNDED,
        caption=(
            f"{result.total_prompts} prompts, {result.total_mentions} mentions, "
            f"confidence: {result.confidence_level}"
        ),
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Brand", style="cyan", no_wrap=True)
    table.add_column("Coverage", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("First", justify="right")
    table.add_column("Missed", justify="right")
    table.add_column("Mentions", justify="right", style="magenta")

    for rank, brand in enumerate(result.brands, start=1):
        style = LEVEL_STYLES[visibility_level(brand.prompt_coverage)]
        table.add_row(
            str(rank),
            brand.name,
            f"[{style}]{brand.prompt_coverage}%[/{style}]",
            f"{brand.mention_share}%",
            f"{brand.mentions_per_prompt}",
            f"{brand.first_mention_rate}%",
            str(brand.missed_prompts),
            str(brand.mentions),
        )

    console.print(table)


def print_citations(result: AnalysisResult, limit: int = 10) -> None:
    """Print the most-cited URLs in human mode."""
    if not output_mode.is_human() or output_mode.quiet or not result.citations:
        return

    table = Table(title="Top Sources", box=box.ROUNDED)
    table.add_column("Domain", style="cyan")
    table.add_column("URL", overflow="fold")
    table.add_column("Count", justify="right", style="green")

    for citation in result.citations[:limit]:
        table.add_row(citation.domain, citation.url, str(citation.count))

    console.print(table)


def print_prompt_breakdown(result: AnalysisResult) -> None:
    """Print which brands each prompt's answer mentioned, in human mode."""
    if not output_mode.is_human() or output_mode.quiet:
        return

    table = Table(title="Prompt Breakdown", box=box.ROUNDED, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Prompt", overflow="fold")
    table.add_column("Brands Mentioned")
    table.add_column("First", style="bold green")

    for index, prompt in enumerate(result.prompts, start=1):
        table.add_row(
            str(index),
            prompt.prompt,
            ", ".join(prompt.brands_mentioned) or "[dim]none[/dim]",
            prompt.first_mention or "-",
        )

    console.print(table)


def print_history(analyses: list[dict]) -> None:
    """
    Print stored analyses from storage.db.list_recent_analyses().

    Agent mode buffers the list under "analyses"; quiet mode prints one
    tab-separated line per analysis.
    """
    if output_mode.is_agent():
        output_mode.add_json("analyses", analyses)
        return

    if output_mode.quiet:
        for item in analyses:
            print(f"{item['id']}\t{item['timestamp_utc']}\t{item['category']}")
        return

    if not analyses:
        info("No analyses stored yet")
        return

    table = Table(title="Analysis History", box=box.ROUNDED)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("When (UTC)")
    table.add_column("Category", style="cyan")
    table.add_column("Model", style="magenta")
    table.add_column("Prompts", justify="right")
    table.add_column("Top Brands")

    for item in analyses:
        top = ", ".join(
            f"{b['name']} ({b['mentions']})" for b in item["top_brands"]
        )
        model = item.get("model_name") or item.get("provider") or "-"
        table.add_row(
            str(item["id"]),
            item["timestamp_utc"],
            item["category"],
            model,
            str(item["prompt_count"]),
            top or "-",
        )

    console.print(table)


def print_final_summary(
    result: AnalysisResult,
    run_id: str | None = None,
    output_dir: str | None = None,
    analysis_id: int | None = None,
) -> None:
    """
    Print the closing summary for an analysis.

    Human mode: Rich panel, green when the confidence level is high, yellow
        for directional, red for low
    Agent mode: Add run identifiers and flush all buffered JSON
    Quiet mode: Tab-separated run_id, output_dir, prompts, mentions,
        confidence
    """
    if output_mode.is_agent():
        output_mode.add_json("run_id", run_id)
        output_mode.add_json("output_dir", output_dir)
        output_mode.add_json("analysis_id", analysis_id)
        output_mode.add_json("total_prompts", result.total_prompts)
        output_mode.add_json("total_mentions", result.total_mentions)
        output_mode.add_json("confidence_level", str(result.confidence_level))
        output_mode.flush_json()
        return

    if output_mode.quiet:
        print(
            f"{run_id or '-'}\t{output_dir or '-'}\t{result.total_prompts}\t"
            f"{result.total_mentions}\t{result.confidence_level}"
        )
        return

    lines = []
    if run_id:
        lines.append(f"[bold]Run ID:[/bold] {run_id}")
    if output_dir:
        lines.append(f"[bold]Output Directory:[/bold] {output_dir}")
    if analysis_id is not None:
        lines.append(f"[bold]History ID:[/bold] {analysis_id}")
    lines.append(f"[bold]Prompts:[/bold] {result.total_prompts}")
    lines.append(f"[bold]Mentions:[/bold] {result.total_mentions}")
    lines.append(f"[bold]Confidence:[/bold] {result.confidence_level}")

    border_style = {"high": "green", "directional": "yellow"}.get(
        str(result.confidence_level), "red"
    )

    panel = Panel(
        "\n".join(lines),
        title="[bold green]✓ Analysis Complete[/bold green]",
        border_style=border_style,
        box=box.ROUNDED,
    )
    console.print(panel)
