"""
Tests for CLI module - commands, output modes and exit codes.

Commands:
    - run, analyze, validate, prompts, demo, chat
    - history list/show/delete
    - main callback: version flag

Output Modes:
    - Human mode (--format text): Rich output
    - Agent mode (--format json): One JSON document on stdout
    - Quiet mode (--quiet): Tab-separated output

Exit Codes:
    - 0: Success
    - 1: Configuration or input error
    - 2: Database error
    - 3: Model query failed
"""

import json
import sqlite3

import pytest
import yaml
from typer.testing import CliRunner

from ai_visibility_tracker.analyzer import PromptResponsePair, analyze
from ai_visibility_tracker.cli import (
    EXIT_CONFIG_ERROR,
    EXIT_DB_ERROR,
    EXIT_QUERY_ERROR,
    EXIT_SUCCESS,
    app,
)
from ai_visibility_tracker.llm_runner.mock_client import MockLLMClient
from ai_visibility_tracker.llm_runner.runner import generate_prompts
from ai_visibility_tracker.storage.db import init_db_if_needed, save_analysis

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def cli_runner():
    """Return CliRunner for testing Typer apps."""
    return CliRunner()


@pytest.fixture
def config_factory(tmp_path):
    """Write a tracker config YAML and return its path."""

    def _make(**overrides):
        data = {
            "category": "CRM software",
            "brands": ["HubSpot", "Salesforce", "Pipedrive"],
            "provider": {"name": "openai", "model_name": "gpt-4o-mini"},
            "run_settings": {
                "output_dir": str(tmp_path / "output"),
                "sqlite_db_path": str(tmp_path / "history.db"),
            },
        }
        data.update(overrides)
        path = tmp_path / "tracker.config.yaml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _make


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")


@pytest.fixture
def mock_client(monkeypatch):
    """Replace the real provider client used by `run` and `chat`."""
    client = MockLLMClient(
        response_factory=lambda prompt: "HubSpot and Salesforce. https://hubspot.com"
    )
    factory = lambda provider: client  # noqa: E731
    monkeypatch.setattr("ai_visibility_tracker.llm_runner.runner.build_client", factory)
    monkeypatch.setattr("ai_visibility_tracker.cli.build_client", factory)
    return client


@pytest.fixture
def responses_file(tmp_path):
    path = tmp_path / "responses.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "category": "project management tools",
                "brands": ["Asana", "Trello"],
                "model_name": "chatgpt-web",
                "prompts": [
                    {"prompt": "Best PM tool?", "response": "Asana, then Trello."},
                    {"prompt": "Free PM tool?", "response": "Trello (https://trello.com)."},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def history_db(tmp_path):
    """History database with two stored analyses."""
    path = str(tmp_path / "history.db")
    init_db_if_needed(path)
    result = analyze(
        "CRM software",
        ["HubSpot", "Salesforce"],
        [PromptResponsePair("Best CRM?", "HubSpot first, Salesforce second.")],
    )
    with sqlite3.connect(path) as conn:
        first = save_analysis(conn, result, timestamp_utc="2025-11-01T00:00:00Z", provider="openai")
        second = save_analysis(
            conn, result, timestamp_utc="2025-11-02T00:00:00Z", model_name="gpt-4o"
        )
    return path, first, second


def parse_json_output(output: str) -> dict:
    """Extract the pretty-printed JSON document, ignoring single-line log records."""
    lines = output.splitlines()
    start = lines.index("{")
    end = len(lines) - lines[::-1].index("}")
    return json.loads("\n".join(lines[start:end]))


# ============================================================================
# main callback
# ============================================================================


class TestMainCallback:
    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == EXIT_SUCCESS
        assert "ai-visibility-tracker" in result.output
        assert "version" in result.output

    def test_no_command_shows_hint(self, cli_runner):
        result = cli_runner.invoke(app, [])

        assert "--help" in result.output


# ============================================================================
# run
# ============================================================================


class TestRunCommand:
    def test_run_json(self, cli_runner, config_factory, api_key, mock_client, tmp_path):
        result = cli_runner.invoke(
            app, ["run", "--config", str(config_factory()), "--format", "json"]
        )

        assert result.exit_code == EXIT_SUCCESS
        data = parse_json_output(result.output)
        assert data["total_prompts"] == 10
        assert data["analysis_id"] == 1
        assert data["analysis"]["brands"][0]["name"] in {"HubSpot", "Salesforce"}
        assert (tmp_path / "output" / data["run_id"] / "report.html").is_file()
        assert len(mock_client.calls) == 10

    def test_run_human(self, cli_runner, config_factory, api_key, mock_client):
        result = cli_runner.invoke(app, ["run", "--config", str(config_factory())])

        assert result.exit_code == EXIT_SUCCESS
        assert "Analysis Complete" in result.output
        assert "View report" in result.output

    def test_run_quiet(self, cli_runner, config_factory, api_key, mock_client):
        result = cli_runner.invoke(app, ["run", "--config", str(config_factory()), "--quiet"])

        assert result.exit_code == EXIT_SUCCESS
        brand_lines = [line for line in result.output.splitlines() if line.startswith("HubSpot\t")]
        assert brand_lines

    def test_custom_prompts(self, cli_runner, config_factory, api_key, mock_client):
        path = config_factory(prompts=["Which CRM for agencies?", "Which CRM is cheapest?"])

        result = cli_runner.invoke(app, ["run", "--config", str(path), "--format", "json"])

        assert result.exit_code == EXIT_SUCCESS
        assert mock_client.calls == ["Which CRM for agencies?", "Which CRM is cheapest?"]

    def test_missing_api_key(self, cli_runner, config_factory, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        result = cli_runner.invoke(
            app, ["run", "--config", str(config_factory()), "--format", "json"]
        )

        assert result.exit_code == EXIT_CONFIG_ERROR
        data = parse_json_output(result.output)
        assert data["error_type"] == "api_key_missing"

    def test_invalid_config(self, cli_runner, config_factory, api_key):
        path = config_factory(brands=["OnlyOne"])

        result = cli_runner.invoke(app, ["run", "--config", str(path), "--format", "json"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert parse_json_output(result.output)["error_type"] == "validation_error"

    def test_database_error(self, cli_runner, config_factory, api_key, mock_client, tmp_path):
        blocked = tmp_path / "blocked.db"
        blocked.mkdir()
        path = config_factory(
            run_settings={"output_dir": str(tmp_path / "output"), "sqlite_db_path": str(blocked)}
        )

        result = cli_runner.invoke(app, ["run", "--config", str(path), "--format", "json"])

        assert result.exit_code == EXIT_DB_ERROR
        assert mock_client.calls == []

    def test_query_failure(self, cli_runner, config_factory, api_key, mock_client):
        mock_client.fail_on = {generate_prompts("CRM software")[0]}

        result = cli_runner.invoke(
            app, ["run", "--config", str(config_factory()), "--format", "json"]
        )

        assert result.exit_code == EXIT_QUERY_ERROR
        assert parse_json_output(result.output)["error_type"] == "provider_error"

    def test_invalid_format(self, cli_runner, config_factory):
        result = cli_runner.invoke(
            app, ["run", "--config", str(config_factory()), "--format", "xml"]
        )

        assert result.exit_code == EXIT_CONFIG_ERROR


# ============================================================================
# analyze
# ============================================================================


class TestAnalyzeCommand:
    def test_analyze_json(self, cli_runner, responses_file):
        result = cli_runner.invoke(
            app, ["analyze", "--responses", str(responses_file), "--format", "json"]
        )

        assert result.exit_code == EXIT_SUCCESS
        data = parse_json_output(result.output)
        assert data["analysis"]["category"] == "project management tools"
        assert data["total_prompts"] == 2
        assert data["output_dir"] is None
        assert data["analysis_id"] is None
        trello = next(b for b in data["analysis"]["brands"] if b["name"] == "Trello")
        assert trello["promptCoverage"] == 100.0

    def test_analyze_writes_artifacts_and_history(self, cli_runner, responses_file, tmp_path):
        db_path = tmp_path / "history.db"

        result = cli_runner.invoke(
            app,
            [
                "analyze",
                "-r",
                str(responses_file),
                "-o",
                str(tmp_path / "out"),
                "--db",
                str(db_path),
                "--format",
                "json",
            ],
        )

        assert result.exit_code == EXIT_SUCCESS
        data = parse_json_output(result.output)
        run_dir = tmp_path / "out" / data["run_id"]
        assert (run_dir / "analysis.json").is_file()
        meta = json.loads((run_dir / "run_meta.json").read_text(encoding="utf-8"))
        assert meta["provider"] == "recorded"
        assert meta["model_name"] == "chatgpt-web"
        assert data["analysis_id"] == 1
        with sqlite3.connect(db_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM analyses").fetchone()[0] == 1

    def test_invalid_responses_file(self, cli_runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("category: x\nbrands: []\nprompts: []\n", encoding="utf-8")

        result = cli_runner.invoke(app, ["analyze", "--responses", str(path), "--format", "json"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert parse_json_output(result.output)["status"] == "error"


# ============================================================================
# validate / prompts
# ============================================================================


class TestValidateCommand:
    def test_valid_config_json(self, cli_runner, config_factory, api_key):
        result = cli_runner.invoke(
            app, ["validate", "--config", str(config_factory()), "--format", "json"]
        )

        assert result.exit_code == EXIT_SUCCESS
        data = parse_json_output(result.output)
        assert data["valid"] is True
        assert data["brands_count"] == 3
        assert data["prompts_count"] == 10
        assert data["model_name"] == "gpt-4o-mini"

    def test_valid_config_human(self, cli_runner, config_factory, api_key):
        result = cli_runner.invoke(app, ["validate", "--config", str(config_factory())])

        assert result.exit_code == EXIT_SUCCESS
        assert "Configuration is valid" in result.output

    def test_invalid_config(self, cli_runner, config_factory, api_key):
        path = config_factory(brands=["HubSpot", "hubspot"])

        result = cli_runner.invoke(app, ["validate", "--config", str(path), "--format", "json"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        data = parse_json_output(result.output)
        assert data["valid"] is False
        assert "Duplicate brand" in data["error"]


class TestPromptsCommand:
    def test_json(self, cli_runner):
        result = cli_runner.invoke(app, ["prompts", "--category", "CRM software", "--format", "json"])

        assert result.exit_code == EXIT_SUCCESS
        data = parse_json_output(result.output)
        assert data["prompts"] == generate_prompts("CRM software")

    def test_quiet_one_per_line(self, cli_runner):
        result = cli_runner.invoke(app, ["prompts", "--category", "CRM software", "--quiet"])

        assert result.exit_code == EXIT_SUCCESS
        assert result.output.splitlines() == generate_prompts("CRM software")

    def test_category_too_short(self, cli_runner):
        result = cli_runner.invoke(app, ["prompts", "--category", " x "])

        assert result.exit_code == EXIT_CONFIG_ERROR


# ============================================================================
# demo / chat
# ============================================================================


class TestDemoCommand:
    def test_demo_json(self, cli_runner):
        result = cli_runner.invoke(app, ["demo", "--format", "json"])

        assert result.exit_code == EXIT_SUCCESS
        data = parse_json_output(result.output)
        assert data["total_prompts"] == 10
        names = [b["name"] for b in data["analysis"]["brands"]]
        assert sorted(names) == ["HubSpot", "Pipedrive", "Salesforce", "Zoho CRM"]
        assert data["analysis"]["citations"]

    def test_demo_human(self, cli_runner):
        result = cli_runner.invoke(app, ["demo"])

        assert result.exit_code == EXIT_SUCCESS
        assert "Brand Leaderboard" in result.output


class TestChatCommand:
    def test_chat_session(self, cli_runner, config_factory, api_key, mock_client):
        result = cli_runner.invoke(
            app,
            ["chat", "--config", str(config_factory()), "--format", "json"],
            input="Best CRM?\nCheapest CRM?\nexit\n",
        )

        assert result.exit_code == EXIT_SUCCESS
        assert mock_client.calls == ["Best CRM?", "Cheapest CRM?"]
        data = parse_json_output(result.output)
        assert data["total_prompts"] == 2
        hubspot = next(b for b in data["analysis"]["brands"] if b["name"] == "HubSpot")
        assert hubspot["promptCoverage"] == 100.0

    def test_chat_human_shows_mentions(self, cli_runner, config_factory, api_key, mock_client):
        result = cli_runner.invoke(
            app, ["chat", "--config", str(config_factory())], input="Best CRM?\n\n"
        )

        assert result.exit_code == EXIT_SUCCESS
        assert "Brands mentioned: HubSpot, Salesforce" in result.output
        assert "First mention: HubSpot" in result.output

    def test_chat_without_messages(self, cli_runner, config_factory, api_key, mock_client):
        result = cli_runner.invoke(
            app, ["chat", "--config", str(config_factory()), "--format", "json"], input="quit\n"
        )

        assert result.exit_code == EXIT_SUCCESS
        assert parse_json_output(result.output)["total_prompts"] == 0

    def test_chat_query_failure(self, cli_runner, config_factory, api_key, mock_client):
        mock_client.fail_on = {"Best CRM?"}

        result = cli_runner.invoke(
            app, ["chat", "--config", str(config_factory()), "--format", "json"], input="Best CRM?\n"
        )

        assert result.exit_code == EXIT_QUERY_ERROR


# ============================================================================
# history
# ============================================================================


class TestHistoryCommands:
    def test_list_json(self, cli_runner, history_db):
        path, first, second = history_db

        result = cli_runner.invoke(app, ["history", "list", "--db", path, "--format", "json"])

        assert result.exit_code == EXIT_SUCCESS
        data = parse_json_output(result.output)
        assert [a["id"] for a in data["analyses"]] == [second, first]

    def test_list_quiet_with_limit(self, cli_runner, history_db):
        path, _, second = history_db

        result = cli_runner.invoke(app, ["history", "list", "--db", path, "-n", "1", "--quiet"])

        assert result.exit_code == EXIT_SUCCESS
        assert result.output.splitlines() == [f"{second}\t2025-11-02T00:00:00Z\tCRM software"]

    def test_list_empty_database(self, cli_runner, tmp_path):
        result = cli_runner.invoke(app, ["history", "list", "--db", str(tmp_path / "new.db")])

        assert result.exit_code == EXIT_SUCCESS
        assert "No analyses stored yet" in result.output

    def test_show_json(self, cli_runner, history_db):
        path, first, _ = history_db

        result = cli_runner.invoke(
            app, ["history", "show", str(first), "--db", path, "--format", "json"]
        )

        assert result.exit_code == EXIT_SUCCESS
        data = parse_json_output(result.output)
        assert data["analysis_id"] == first
        assert data["analysis"]["brands"][0]["name"] == "HubSpot"

    def test_show_missing(self, cli_runner, history_db):
        path, _, _ = history_db

        result = cli_runner.invoke(app, ["history", "show", "999", "--db", path, "--format", "json"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert parse_json_output(result.output)["error_type"] == "not_found"

    def test_delete_with_yes(self, cli_runner, history_db):
        path, first, second = history_db

        result = cli_runner.invoke(app, ["history", "delete", str(first), "--db", path, "--yes"])

        assert result.exit_code == EXIT_SUCCESS
        with sqlite3.connect(path) as conn:
            ids = [row[0] for row in conn.execute("SELECT id FROM analyses")]
        assert ids == [second]

    def test_delete_cancelled(self, cli_runner, history_db):
        path, first, _ = history_db

        result = cli_runner.invoke(
            app, ["history", "delete", str(first), "--db", path], input="n\n"
        )

        assert result.exit_code == EXIT_SUCCESS
        assert "Cancelled" in result.output
        with sqlite3.connect(path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM analyses").fetchone()[0] == 2

    def test_delete_json(self, cli_runner, history_db):
        path, _, second = history_db

        result = cli_runner.invoke(
            app, ["history", "delete", str(second), "--db", path, "--format", "json"]
        )

        assert result.exit_code == EXIT_SUCCESS
        assert parse_json_output(result.output)["deleted"] == second

    def test_delete_missing(self, cli_runner, history_db):
        path, _, _ = history_db

        result = cli_runner.invoke(app, ["history", "delete", "999", "--db", path, "--yes"])

        assert result.exit_code == EXIT_CONFIG_ERROR
