"""
Configuration loader for AI Visibility Tracker.

This module loads YAML configuration files, validates them with Pydantic
models, applies provider defaults and resolves the API key from the
environment to create a RuntimeConfig. It also loads recorded response files
(YAML or JSON) for offline analysis.

Functions:
    load_config: Main entrypoint to load and validate tracker.config.yaml
    resolve_provider: Apply provider defaults and resolve the API key
    load_responses_file: Load recorded prompt/response pairs
"""

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from ai_visibility_tracker.exceptions import (
    APIKeyMissingError,
    ConfigFileNotFoundError,
    ConfigValidationError,
    ResponsesFileError,
)

from .constants import OLLAMA_API_KEY, PLACEHOLDER_API_KEY, PROVIDER_DEFAULTS
from .schema import (
    ProviderConfig,
    ResponsesFile,
    RuntimeConfig,
    RuntimeProvider,
    TrackerConfig,
)


def _format_validation_error(error: ValidationError) -> str:
    lines = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"]) or "(root)"
        lines.append(f"  - {loc}: {item['msg']}")
    return "\n".join(lines)


def _read_yaml(path: Path, error_cls: type[Exception]) -> dict:
    """
    Read a YAML (or JSON, which is valid YAML) mapping from disk.

    Raises:
        error_cls: If the file is unreadable, not YAML, empty, or not a mapping
    """
    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise error_cls(f"Invalid YAML syntax in {path}: {e}") from e
    except OSError as e:
        raise error_cls(f"Failed to read file {path}: {e}") from e

    if raw is None:
        raise error_cls(f"File is empty: {path}")
    if not isinstance(raw, dict):
        raise error_cls(
            f"Expected a mapping at the top level of {path}, got {type(raw).__name__}"
        )
    return raw


def load_config(config_path: str | Path) -> RuntimeConfig:
    """
    Load tracker.config.yaml and resolve the provider API key.

    This function:
    1. Loads YAML from the specified path
    2. Validates structure using the TrackerConfig Pydantic model
    3. Applies provider defaults and resolves the API key environment variable
    4. Returns RuntimeConfig ready for the runner

    Args:
        config_path: Path to tracker.config.yaml (relative or absolute)

    Returns:
        RuntimeConfig with resolved provider

    Raises:
        ConfigFileNotFoundError: If config file doesn't exist
        ConfigValidationError: If YAML is invalid or config validation fails
        APIKeyMissingError: If the provider's API key is not set

    Example:
        >>> config = load_config("examples/tracker.config.yaml")
        >>> config.provider.model_name
        'gpt-4o'

    Security:
        - API keys are loaded from environment variables only
        - API keys are NEVER logged or written to disk
        - Uses yaml.safe_load() to prevent code injection
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(f"Configuration file not found: {config_path}")

    raw_config = _read_yaml(config_path, ConfigValidationError)

    try:
        tracker_config = TrackerConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigValidationError(
            f"Configuration validation failed in {config_path}:\n"
            + _format_validation_error(e)
        ) from e

    provider = resolve_provider(tracker_config.provider)

    return RuntimeConfig(
        category=tracker_config.category,
        brands=tracker_config.brands,
        prompts=tracker_config.prompts,
        provider=provider,
        run_settings=tracker_config.run_settings,
    )


def resolve_provider(provider: ProviderConfig) -> RuntimeProvider:
    """
    Apply provider defaults and resolve the API key from the environment.

    Ollama runs locally and accepts any key, so it needs no environment
    variable unless env_api_key is set explicitly.

    Args:
        provider: Validated provider block from the YAML

    Returns:
        RuntimeProvider with every field populated

    Raises:
        APIKeyMissingError: If the key variable is unset, empty, or still the
            sample placeholder value
    """
    defaults = PROVIDER_DEFAULTS[provider.name]
    env_var = provider.env_api_key or defaults["env_api_key"]

    if env_var is None:
        api_key = OLLAMA_API_KEY
    else:
        api_key = os.environ.get(env_var, "")
        if not api_key or api_key.isspace():
            raise APIKeyMissingError(
                f"Environment variable ${env_var} not set "
                f"(required for {defaults['display_name']})"
            )
        if api_key == PLACEHOLDER_API_KEY:
            raise APIKeyMissingError(
                f"Environment variable ${env_var} still holds the placeholder key; "
                "set a real API key"
            )

    temperature = provider.temperature
    if temperature is None:
        temperature = defaults["temperature"]

    return RuntimeProvider(
        name=provider.name,
        display_name=defaults["display_name"],
        model_name=provider.model_name or defaults["model_name"],
        base_url=provider.base_url or defaults["base_url"],
        api_key=api_key,
        temperature=temperature,
        max_tokens=provider.max_tokens,
    )


def load_responses_file(path: str | Path) -> ResponsesFile:
    """
    Load recorded prompt/response pairs for offline analysis.

    Accepts YAML or JSON with `category`, `brands` and a `prompts` list of
    `{prompt, response}` mappings.

    Raises:
        ResponsesFileError: If the file is missing, unparsable, or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ResponsesFileError(f"Responses file not found: {path}")

    raw = _read_yaml(path, ResponsesFileError)

    try:
        return ResponsesFile.model_validate(raw)
    except ValidationError as e:
        raise ResponsesFileError(
            f"Responses file validation failed in {path}:\n"
            + _format_validation_error(e)
        ) from e
