"""
Entry point for running AI Visibility Tracker as a module.

Enables execution via:
    python -m ai_visibility_tracker [command] [options]

Examples:
    python -m ai_visibility_tracker --help
    python -m ai_visibility_tracker run --config examples/tracker.config.yaml
    python -m ai_visibility_tracker demo
"""

from ai_visibility_tracker.cli import app

if __name__ == "__main__":
    app()
