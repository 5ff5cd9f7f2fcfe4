"""
CLI entrypoint for AI Visibility Tracker.

Provides a dual-mode command-line interface with:
- Human-friendly output: Rich spinners, tables, progress bars, colored text
- Agent-friendly output: Structured JSON for AI automation
- Quiet mode: Tab-separated minimal output for shell scripts

Commands:
    run: Query a model with category prompts and analyze brand visibility
    analyze: Analyze recorded prompt/response pairs offline
    validate: Validate configuration without running queries
    prompts: Show the prompts a run would send for a category
    demo: Run a demo with canned answers (no API key needed)
    chat: Chat with a model while tracking brand mentions live
    history: Browse stored analyses (list, show, delete)

Exit codes:
    0: Success
    1: Configuration or input error (invalid YAML, missing API keys)
    2: Database error (cannot create/access SQLite)
    3: Model query failure (no analysis produced)

Examples:
    # Human-friendly output with progress bars
    ai-visibility-tracker run --config tracker.config.yaml

    # Agent-friendly JSON output (no spinners, no colors)
    ai-visibility-tracker run --config tracker.config.yaml --format json

    # Analyze answers collected elsewhere
    ai-visibility-tracker analyze --responses responses.yaml --quiet

Security:
    - API keys are loaded from environment variables only
    - Errors may contain file paths but never API keys
"""

import asyncio
import sqlite3
import tempfile
from pathlib import Path

import typer
from rich.traceback import install as install_rich_traceback

from ai_visibility_tracker.analyzer import AnalysisResult, AnalysisSession, analyze
from ai_visibility_tracker.config.constants import (
    MAX_CATEGORY_LENGTH,
    MIN_CATEGORY_LENGTH,
)
from ai_visibility_tracker.config.loader import load_config, load_responses_file
from ai_visibility_tracker.config.schema import (
    RunSettings,
    RuntimeConfig,
    RuntimeProvider,
)
from ai_visibility_tracker.exceptions import (
    APIKeyMissingError,
    ConfigFileNotFoundError,
    ConfigurationError,
    ConfigValidationError,
    DatabaseError,
    LLMProviderError,
    ResponsesFileError,
)
from ai_visibility_tracker.llm_runner.mock_client import MockLLMClient
from ai_visibility_tracker.llm_runner.models import build_client
from ai_visibility_tracker.llm_runner.runner import generate_prompts, run_analysis
from ai_visibility_tracker.report.generator import write_report
from ai_visibility_tracker.storage.db import (
    delete_analysis,
    get_analysis,
    init_db_if_needed,
    list_recent_analyses,
    save_analysis,
)
from ai_visibility_tracker.storage.writer import (
    create_run_directory,
    write_analysis,
    write_run_meta,
)
from ai_visibility_tracker.utils.console import (
    create_progress_bar,
    error,
    info,
    output_mode,
    print_banner,
    print_citations,
    print_final_summary,
    print_history,
    print_leaderboard,
    print_prompt_breakdown,
    spinner,
    success,
    warning,
)
from ai_visibility_tracker.utils.logging import setup_logging
from ai_visibility_tracker.utils.time import run_id_from_timestamp, utc_now

# Install Rich traceback handler for better error messages
install_rich_traceback(show_locals=False)

# Exit codes
EXIT_SUCCESS = 0  # Analysis produced
EXIT_CONFIG_ERROR = 1  # Config or input validation failed
EXIT_DB_ERROR = 2  # Database initialization or query failed
EXIT_QUERY_ERROR = 3  # A model query failed, nothing analyzed

DEFAULT_DB_PATH = RunSettings().sqlite_db_path

CHAT_EXIT_WORDS = {"exit", "quit", ":q"}

DEMO_CATEGORY = "CRM software"
DEMO_BRANDS = ["HubSpot", "Salesforce", "Pipedrive", "Zoho CRM"]
DEMO_ANSWERS = (
    "For most teams **HubSpot** is the easiest place to start: the free tier "
    "is generous and it grows with you (https://www.hubspot.com/products/crm). "
    "Salesforce is the enterprise standard (https://www.salesforce.com/crm/), "
    "while Pipedrive suits small sales teams that live in a pipeline view.",
    "1. Salesforce - unmatched customization for large organizations.\n"
    "2. HubSpot - strong marketing tools and a free CRM.\n"
    "3. Zoho CRM - affordable and feature-rich (https://www.zoho.com/crm/).\n"
    "Salesforce wins on ecosystem; HubSpot wins on ease of use.",
    "If budget matters most, look at Zoho CRM and Pipedrive. Zoho CRM has a "
    "free plan for three users, and Pipedrive starts at a low per-seat price "
    "(https://www.pipedrive.com/en/pricing).",
    "Pipedrive is built for deal tracking and is very visual. HubSpot offers "
    "more marketing automation. See https://www.hubspot.com/products/crm and "
    "https://www.pipedrive.com/ for details.",
    "Popular choices right now include HubSpot, Salesforce and Zoho CRM. "
    "HubSpot keeps gaining share among startups.",
)

# Create Typer app
app = typer.Typer(
    name="ai-visibility-tracker",
    help="Measure how often AI answers mention your brand vs competitors",
    add_completion=False,
)
history_app = typer.Typer(help="Browse stored analyses")
app.add_typer(history_app, name="history")


def _set_output_mode(format: str, quiet: bool, verbose: bool) -> None:
    """Apply the shared --format/--quiet/--verbose flags for one command."""
    output_mode.reset()
    if format not in ("text", "json"):
        error(f"Invalid format: {format}. Must be 'text' or 'json'")
        raise typer.Exit(EXIT_CONFIG_ERROR)
    output_mode.format = format
    output_mode.quiet = quiet

    # Suppress JSON logs in human mode (unless verbose=True)
    setup_logging(verbose=verbose, quiet_logs=output_mode.is_human())


def _fail(message: str, exit_code: int, error_type: str | None = None) -> None:
    """Report an error in the current output mode and exit."""
    error(message)
    if output_mode.is_agent():
        if error_type:
            output_mode.add_json("error_type", error_type)
        output_mode.flush_json()
    raise typer.Exit(exit_code)


def _print_analysis(
    result: AnalysisResult,
    run_id: str | None = None,
    output_dir: str | None = None,
    analysis_id: int | None = None,
) -> None:
    print_leaderboard(result)
    print_citations(result)
    print_prompt_breakdown(result)
    print_final_summary(
        result, run_id=run_id, output_dir=output_dir, analysis_id=analysis_id
    )


def _run_with_progress(config: RuntimeConfig, client=None) -> dict:
    """Run an analysis, driving a progress bar in human mode."""
    prompt_count = len(config.prompts) or len(generate_prompts(config.category))
    progress = create_progress_bar()

    with progress:
        task = progress.add_task("Querying model", total=prompt_count)

        def _on_progress(completed: int, total: int) -> None:
            progress.update(task, completed=completed, total=total)

        return asyncio.run(
            run_analysis(config, client=client, progress_callback=_on_progress)
        )


def _open_history(db_path: str) -> sqlite3.Connection:
    """Initialize the history database and open a connection, exiting on failure."""
    try:
        init_db_if_needed(db_path)
    except DatabaseError as e:
        _fail(f"Failed to initialize database: {e}", EXIT_DB_ERROR, "database_error")
    return sqlite3.connect(db_path)


# ============================================================================
# Analysis commands
# ============================================================================


@app.command()
def run(
    config: Path = typer.Option(
        ...,
        "--config",
        "-c",
        help="Path to YAML configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' (human-friendly) or 'json' (machine-readable)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output (tab-separated values)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
):
    """
    Query a model with category prompts and report brand visibility.

    This command will:
    1. Load your configuration (category, brands, provider)
    2. Send the category prompts (or your custom prompts) to the model
    3. Count brand mentions, first mentions and cited sources
    4. Write analysis.json, run_meta.json and report.html
    5. Record the analysis in the history database

    Exit codes:
      0: Analysis completed
      1: Configuration error
      2: Database error
      3: A model query failed

    Examples:
      ai-visibility-tracker run --config tracker.config.yaml
      ai-visibility-tracker run --config tracker.config.yaml --format json
    """
    _set_output_mode(format, quiet, verbose)
    print_banner(_read_version())

    try:
        with spinner("Loading configuration..."):
            runtime_config = load_config(config)
        success(
            f"Loaded category '{runtime_config.category}' with "
            f"{len(runtime_config.brands)} brands"
        )
    except ConfigFileNotFoundError as e:
        _fail(f"Configuration file not found: {e}", EXIT_CONFIG_ERROR, "file_not_found")
    except APIKeyMissingError as e:
        _fail(f"API key missing: {e}", EXIT_CONFIG_ERROR, "api_key_missing")
    except ConfigValidationError as e:
        _fail(f"Configuration validation failed: {e}", EXIT_CONFIG_ERROR, "validation_error")

    db_path = runtime_config.run_settings.sqlite_db_path
    try:
        with spinner("Initializing database..."):
            init_db_if_needed(db_path)
        success(f"Database ready: {db_path}")
    except DatabaseError as e:
        _fail(f"Failed to initialize database: {e}", EXIT_DB_ERROR, "database_error")

    provider = runtime_config.provider
    info(f"Querying {provider.display_name} ({provider.model_name})")

    try:
        summary = _run_with_progress(runtime_config)
    except LLMProviderError as e:
        _fail(f"Model query failed: {e}", EXIT_QUERY_ERROR, "provider_error")
    except (OSError, ValueError) as e:
        _fail(f"Run failed: {e}", EXIT_CONFIG_ERROR, "output_error")

    if summary["analysis_id"] is None:
        warning("Analysis was not saved to history (see logs)")

    _print_analysis(
        summary["result"],
        run_id=summary["run_id"],
        output_dir=summary["output_dir"],
        analysis_id=summary["analysis_id"],
    )

    if output_mode.is_human() and not output_mode.quiet:
        report_path = Path(summary["output_dir"]) / "report.html"
        info(f"View report: file://{report_path.absolute()}")

    raise typer.Exit(EXIT_SUCCESS)


@app.command("analyze")
def analyze_command(
    responses: Path = typer.Option(
        ...,
        "--responses",
        "-r",
        help="YAML/JSON file with category, brands and recorded prompt/response pairs",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Write analysis.json, run_meta.json and report.html under this directory",
    ),
    db: Path | None = typer.Option(
        None,
        "--db",
        help="Also record the analysis in this SQLite history database",
    ),
    format: str = typer.Option("text", "--format", "-f", help="Output format: 'text' or 'json'"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Minimal output (tab-separated values)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Analyze recorded answers without querying any model.

    Useful for answers collected by hand from chat interfaces, or from
    another tool.

    Examples:
      ai-visibility-tracker analyze --responses responses.yaml
      ai-visibility-tracker analyze -r responses.yaml -o ./output --db ./output/visibility.db
    """
    _set_output_mode(format, quiet, verbose)

    try:
        recorded = load_responses_file(responses)
    except ResponsesFileError as e:
        _fail(str(e), EXIT_CONFIG_ERROR, "validation_error")

    result = analyze(
        recorded.category,
        recorded.brands,
        [(exchange.prompt, exchange.response) for exchange in recorded.prompts],
    )

    started = utc_now()
    run_id = run_id_from_timestamp(started)
    timestamp_utc = started.strftime("%Y-%m-%dT%H:%M:%SZ")

    run_dir = None
    if output_dir is not None:
        run_meta = {
            "run_id": run_id,
            "timestamp_utc": timestamp_utc,
            "category": recorded.category,
            "brands": recorded.brands,
            "provider": "recorded",
            "model_name": recorded.model_name,
            "source_file": responses.name,
            "total_prompts": result.total_prompts,
            "total_mentions": result.total_mentions,
            "confidence_level": str(result.confidence_level),
        }
        try:
            run_dir = create_run_directory(str(output_dir), run_id)
            write_analysis(run_dir, result)
            write_run_meta(run_dir, run_meta)
            write_report(run_dir, result, run_meta)
        except (OSError, ValueError) as e:
            _fail(f"Failed to write artifacts: {e}", EXIT_CONFIG_ERROR, "output_error")

    analysis_id = None
    if db is not None:
        conn = _open_history(str(db))
        try:
            with conn:
                analysis_id = save_analysis(
                    conn,
                    result,
                    run_id=run_id,
                    timestamp_utc=timestamp_utc,
                    provider="recorded",
                    model_name=recorded.model_name,
                )
        except DatabaseError as e:
            _fail(f"Failed to save analysis: {e}", EXIT_DB_ERROR, "database_error")
        finally:
            conn.close()

    _print_analysis(result, run_id=run_id, output_dir=run_dir, analysis_id=analysis_id)
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def validate(
    config: Path = typer.Option(
        ...,
        "--config",
        "-c",
        help="Path to YAML configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' or 'json'",
    ),
):
    """
    Validate configuration file without querying any model.

    Checks:
    - YAML syntax is valid
    - Category, brands and custom prompts pass validation rules
    - The provider's API key environment variable is set

    Exit codes:
      0: Configuration is valid
      1: Configuration is invalid

    Examples:
      ai-visibility-tracker validate --config tracker.config.yaml
      ai-visibility-tracker validate --config tracker.config.yaml --format json
    """
    _set_output_mode(format, False, False)

    try:
        runtime_config = load_config(config)
    except ConfigFileNotFoundError as e:
        output_mode.add_json("valid", False)
        _fail(f"Configuration file not found: {e}", EXIT_CONFIG_ERROR, "file_not_found")
    except APIKeyMissingError as e:
        output_mode.add_json("valid", False)
        _fail(f"API key missing: {e}", EXIT_CONFIG_ERROR, "api_key_missing")
    except ConfigurationError as e:
        output_mode.add_json("valid", False)
        _fail(f"Validation failed: {e}", EXIT_CONFIG_ERROR, "validation_error")

    prompt_count = len(runtime_config.prompts) or len(
        generate_prompts(runtime_config.category)
    )

    success("Configuration is valid")
    info(f"Category: {runtime_config.category}")
    info(f"Brands: {', '.join(runtime_config.brands)}")
    info(
        f"Prompts: {prompt_count}"
        + (" (custom)" if runtime_config.prompts else " (category templates)")
    )
    info(
        f"Provider: {runtime_config.provider.display_name} "
        f"({runtime_config.provider.model_name})"
    )

    if output_mode.is_agent():
        output_mode.add_json("valid", True)
        output_mode.add_json("category", runtime_config.category)
        output_mode.add_json("brands_count", len(runtime_config.brands))
        output_mode.add_json("prompts_count", prompt_count)
        output_mode.add_json("provider", runtime_config.provider.name)
        output_mode.add_json("model_name", runtime_config.provider.model_name)
        output_mode.flush_json()

    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def prompts(
    category: str = typer.Option(
        ...,
        "--category",
        help="Product category, e.g. 'CRM software'",
    ),
    format: str = typer.Option("text", "--format", "-f", help="Output format: 'text' or 'json'"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="One prompt per line"),
):
    """
    Show the prompts a run sends for a category.

    Examples:
      ai-visibility-tracker prompts --category "CRM software"
    """
    _set_output_mode(format, quiet, False)

    cleaned = category.strip()
    if not MIN_CATEGORY_LENGTH <= len(cleaned) <= MAX_CATEGORY_LENGTH:
        _fail(
            f"Category must be {MIN_CATEGORY_LENGTH}-{MAX_CATEGORY_LENGTH} characters",
            EXIT_CONFIG_ERROR,
            "validation_error",
        )

    generated = generate_prompts(cleaned)

    if output_mode.is_agent():
        output_mode.add_json("category", cleaned)
        output_mode.add_json("prompts", generated)
        output_mode.flush_json()
    elif output_mode.quiet:
        for prompt in generated:
            print(prompt)
    else:
        for index, prompt in enumerate(generated, start=1):
            info(f"{index:>2}. {prompt}")

    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def demo(
    format: str = typer.Option("text", "--format", "-f", help="Output format: 'text' or 'json'"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Minimal output (tab-separated values)"),
):
    """
    Run a demo with canned answers.

    Runs the full pipeline (prompts, analysis, artifacts, report, history)
    against a mock model in a temporary directory. No API key needed.

    Examples:
      ai-visibility-tracker demo
      ai-visibility-tracker demo --format json
    """
    _set_output_mode(format, quiet, False)
    print_banner(_read_version())

    demo_prompts = generate_prompts(DEMO_CATEGORY)
    client = MockLLMClient(
        responses={
            prompt: DEMO_ANSWERS[index % len(DEMO_ANSWERS)]
            for index, prompt in enumerate(demo_prompts)
        },
        model_name="demo-model",
        provider="demo",
    )

    info(f"Category: {DEMO_CATEGORY}")
    info(f"Brands: {', '.join(DEMO_BRANDS)}")

    with tempfile.TemporaryDirectory() as tmpdir:
        config = RuntimeConfig(
            category=DEMO_CATEGORY,
            brands=DEMO_BRANDS,
            provider=RuntimeProvider(
                name="demo",
                display_name="Demo",
                model_name="demo-model",
                base_url="http://localhost",
                api_key="demo",
                temperature=0.4,
            ),
            run_settings=RunSettings(
                output_dir=str(Path(tmpdir) / "output"),
                sqlite_db_path=str(Path(tmpdir) / "demo.db"),
            ),
        )

        summary = _run_with_progress(config, client=client)
        _print_analysis(summary["result"], run_id=summary["run_id"])

    info("Set up a config file and run 'ai-visibility-tracker run' to measure real answers")
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def chat(
    config: Path = typer.Option(
        ...,
        "--config",
        "-c",
        help="Path to YAML configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    format: str = typer.Option("text", "--format", "-f", help="Output format: 'text' or 'json'"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Chat with the configured model while tracking brand mentions.

    Each answer is printed with the tracked brands it mentioned. Type
    'exit' (or an empty line) to finish and see the cumulative leaderboard.

    Examples:
      ai-visibility-tracker chat --config tracker.config.yaml
    """
    _set_output_mode(format, False, verbose)

    try:
        runtime_config = load_config(config)
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}", EXIT_CONFIG_ERROR, "validation_error")

    client = build_client(runtime_config.provider)
    session = AnalysisSession(runtime_config.category, runtime_config.brands)

    info(
        f"Chatting with {runtime_config.provider.display_name} "
        f"({runtime_config.provider.model_name}). Type 'exit' to finish."
    )

    while True:
        prompt = typer.prompt("You", default="", show_default=False).strip()
        if not prompt or prompt.lower() in CHAT_EXIT_WORDS:
            break

        try:
            with spinner("Thinking..."):
                response = asyncio.run(client.generate_answer(prompt))
        except LLMProviderError as e:
            _fail(f"Model query failed: {e}", EXIT_QUERY_ERROR, "provider_error")
        except ValueError as e:
            warning(str(e))
            continue

        metrics = session.add_exchange(prompt, response.answer_text)
        if output_mode.is_human():
            typer.echo(f"\n{response.answer_text}\n")
            mentioned = ", ".join(metrics["brandsMentioned"]) or "none"
            info(f"Brands mentioned: {mentioned}")
            if metrics["firstMention"]:
                info(f"First mention: {metrics['firstMention']}")

    if not len(session):
        info("No messages sent")
        if output_mode.is_agent():
            output_mode.add_json("total_prompts", 0)
            output_mode.flush_json()
        raise typer.Exit(EXIT_SUCCESS)

    _print_analysis(session.results())
    raise typer.Exit(EXIT_SUCCESS)


# ============================================================================
# History commands
# ============================================================================


@history_app.command("list")
def history_list(
    db: Path = typer.Option(Path(DEFAULT_DB_PATH), "--db", help="SQLite history database"),
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Number of analyses to show"),
    format: str = typer.Option("text", "--format", "-f", help="Output format: 'text' or 'json'"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Tab-separated output"),
):
    """
    List recent analyses, newest first.

    Examples:
      ai-visibility-tracker history list --limit 5
    """
    _set_output_mode(format, quiet, False)

    conn = _open_history(str(db))
    try:
        analyses = list_recent_analyses(conn, limit=limit)
    except DatabaseError as e:
        _fail(f"Failed to read history: {e}", EXIT_DB_ERROR, "database_error")
    finally:
        conn.close()

    print_history(analyses)
    output_mode.flush_json()
    raise typer.Exit(EXIT_SUCCESS)


@history_app.command("show")
def history_show(
    analysis_id: int = typer.Argument(..., help="Analysis ID from 'history list'"),
    db: Path = typer.Option(Path(DEFAULT_DB_PATH), "--db", help="SQLite history database"),
    format: str = typer.Option("text", "--format", "-f", help="Output format: 'text' or 'json'"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Tab-separated output"),
):
    """
    Show one stored analysis.

    Examples:
      ai-visibility-tracker history show 3
    """
    _set_output_mode(format, quiet, False)

    conn = _open_history(str(db))
    try:
        stored = get_analysis(conn, analysis_id)
    except DatabaseError as e:
        _fail(f"Failed to read history: {e}", EXIT_DB_ERROR, "database_error")
    finally:
        conn.close()

    if stored is None:
        _fail(f"No analysis with ID {analysis_id}", EXIT_CONFIG_ERROR, "not_found")

    info(
        f"Analysis {stored['id']} from {stored['timestampUtc']} "
        f"({stored['modelName'] or stored['provider'] or 'unknown model'})"
    )
    _print_analysis(
        AnalysisResult.from_dict(stored),
        run_id=stored["runId"],
        analysis_id=stored["id"],
    )
    raise typer.Exit(EXIT_SUCCESS)


@history_app.command("delete")
def history_delete(
    analysis_id: int = typer.Argument(..., help="Analysis ID from 'history list'"),
    db: Path = typer.Option(Path(DEFAULT_DB_PATH), "--db", help="SQLite history database"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    format: str = typer.Option("text", "--format", "-f", help="Output format: 'text' or 'json'"),
):
    """
    Delete one stored analysis.

    Examples:
      ai-visibility-tracker history delete 3 --yes
    """
    _set_output_mode(format, False, False)

    if output_mode.is_human() and not yes and not typer.confirm(
        f"Delete analysis {analysis_id}?"
    ):
        info("Cancelled by user")
        raise typer.Exit(EXIT_SUCCESS)

    conn = _open_history(str(db))
    try:
        with conn:
            deleted = delete_analysis(conn, analysis_id)
    except DatabaseError as e:
        _fail(f"Failed to delete analysis: {e}", EXIT_DB_ERROR, "database_error")
    finally:
        conn.close()

    if not deleted:
        _fail(f"No analysis with ID {analysis_id}", EXIT_CONFIG_ERROR, "not_found")

    success(f"Deleted analysis {analysis_id}")
    if output_mode.is_agent():
        output_mode.add_json("deleted", analysis_id)
        output_mode.flush_json()
    raise typer.Exit(EXIT_SUCCESS)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
):
    """
    AI Visibility Tracker - Measure brand visibility in AI answers.

    Ask a model the questions your buyers ask, then see how often each
    tracked brand is mentioned, mentioned first, and which sources are cited.

    Use 'ai-visibility-tracker COMMAND --help' for detailed command documentation.
    """
    if version:
        from rich.console import Console

        console = Console()
        console.print(
            f"[bold cyan]ai-visibility-tracker[/bold cyan] version {_read_version()}"
        )
        raise typer.Exit(EXIT_SUCCESS)

    if ctx.invoked_subcommand is None:
        from rich.console import Console

        console = Console()
        console.print("[yellow]Use --help to see available commands[/yellow]")
        console.print()
        console.print("Quick start:")
        console.print("  ai-visibility-tracker demo")
        console.print("  ai-visibility-tracker run --config tracker.config.yaml")


def _read_version() -> str:
    """
    Read version from package metadata (pyproject.toml).

    Returns:
        Version string (e.g., "0.1.0")
    """
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("ai-visibility-tracker")
    except PackageNotFoundError:
        return "0.1.0"


if __name__ == "__main__":
    app()
