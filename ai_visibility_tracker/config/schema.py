"""
Configuration schema models for AI Visibility Tracker.

This module defines Pydantic models for validating tracker.config.yaml and
recorded response files used for offline analysis.

Models:
    ProviderConfig: Which OpenAI-compatible provider to query and how
    RunSettings: Output locations and batching
    TrackerConfig: Root configuration model (validates entire YAML)
    RuntimeProvider: Provider with defaults applied and API key resolved
    RuntimeConfig: Runtime configuration passed to the runner
    RecordedExchange: One prompt and the answer a model gave to it
    ResponsesFile: Recorded answers for offline analysis
"""

from typing import Literal

from pydantic import BaseModel, field_validator, model_validator

from .constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_TOKENS,
    MAX_BATCH_SIZE,
    MAX_BRAND_NAME_LENGTH,
    MAX_BRANDS,
    MAX_CATEGORY_LENGTH,
    MAX_CUSTOM_PROMPT_LENGTH,
    MAX_CUSTOM_PROMPTS,
    MIN_BRANDS,
    MIN_CATEGORY_LENGTH,
    MIN_CUSTOM_PROMPTS,
)

ProviderName = Literal["openai", "ollama", "xai", "google"]


def _clean_category(v: str) -> str:
    cleaned = v.strip()
    if not MIN_CATEGORY_LENGTH <= len(cleaned) <= MAX_CATEGORY_LENGTH:
        raise ValueError(
            f"category must be {MIN_CATEGORY_LENGTH}-{MAX_CATEGORY_LENGTH} "
            f"characters (got: {len(cleaned)})"
        )
    return cleaned


def _clean_brands(v: list[str], min_brands: int) -> list[str]:
    """
    Strip brand names and reject blanks, overlong names and duplicates.

    Input order is preserved; it decides nothing in the analysis ranking but
    keeps reports in the order the user wrote them.
    """
    cleaned = []
    seen = set()
    for brand in v:
        name = brand.strip() if brand else ""
        if not name:
            raise ValueError("brand names cannot be empty")
        if len(name) > MAX_BRAND_NAME_LENGTH:
            raise ValueError(
                f"brand name '{name[:20]}...' exceeds {MAX_BRAND_NAME_LENGTH} characters"
            )
        if name.lower() in seen:
            raise ValueError(f"Duplicate brand found: '{name}'")
        seen.add(name.lower())
        cleaned.append(name)

    if not min_brands <= len(cleaned) <= MAX_BRANDS:
        raise ValueError(
            f"between {min_brands} and {MAX_BRANDS} brands required (got: {len(cleaned)})"
        )
    return cleaned


class ProviderConfig(BaseModel):
    """
    Language-model provider configuration from tracker.config.yaml.

    Every field except name is optional; unset fields fall back to the
    provider defaults in config.constants.PROVIDER_DEFAULTS.

    Attributes:
        name: Provider identifier (openai, ollama, xai, google)
        model_name: Model identifier (e.g., "gpt-4o")
        env_api_key: Environment variable holding the API key
        base_url: Override for the OpenAI-compatible endpoint
        temperature: Sampling temperature (0.0-2.0)
        max_tokens: Maximum answer length in tokens
    """

    name: ProviderName = "openai"
    model_name: str | None = None
    env_api_key: str | None = None
    base_url: str | None = None
    temperature: float | None = None
    max_tokens: int = DEFAULT_MAX_TOKENS

    @field_validator("model_name", "env_api_key", "base_url")
    @classmethod
    def validate_not_blank(cls, v: str | None) -> str | None:
        """Validate optional string fields are non-empty when given."""
        if v is not None and (not v or v.isspace()):
            raise ValueError("value cannot be empty")
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str | None) -> str | None:
        """Validate base_url is an http(s) URL and drop any trailing slash."""
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https:// (got: {v})")
        return v.rstrip("/")

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float | None) -> float | None:
        if v is not None and not 0.0 <= v <= 2.0:
            raise ValueError(f"temperature must be between 0.0 and 2.0 (got: {v})")
        return v

    @field_validator("max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_tokens must be positive (got: {v})")
        return v


class RunSettings(BaseModel):
    """
    Runtime settings for tracker execution.

    Attributes:
        output_dir: Directory for run artifacts (JSON files, HTML reports)
        sqlite_db_path: Path to SQLite database for analysis history
        batch_size: Prompts queried concurrently per batch. Range: 1-50.
    """

    output_dir: str = "./output"
    sqlite_db_path: str = "./output/visibility.db"
    batch_size: int = DEFAULT_BATCH_SIZE

    @field_validator("output_dir")
    @classmethod
    def validate_output_dir(cls, v: str) -> str:
        """Validate output_dir is non-empty."""
        if not v or v.isspace():
            raise ValueError("output_dir cannot be empty")
        return v

    @field_validator("sqlite_db_path")
    @classmethod
    def validate_sqlite_db_path(cls, v: str) -> str:
        """Validate sqlite_db_path is non-empty."""
        if not v or v.isspace():
            raise ValueError("sqlite_db_path cannot be empty")
        return v

    @field_validator("batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        """
        Validate batch_size is within safe limits.

        Large batches trip provider rate limits.
        """
        if not 1 <= v <= MAX_BATCH_SIZE:
            raise ValueError(
                f"batch_size must be between 1 and {MAX_BATCH_SIZE} (got: {v})"
            )
        return v


class TrackerConfig(BaseModel):
    """
    Root configuration model for tracker.config.yaml.

    Attributes:
        category: Product category to ask about (e.g., "CRM software")
        brands: Brands to track, 2-10 unique names
        prompts: Optional custom prompts; the built-in templates are used
                 when empty
        provider: Model provider settings
        run_settings: Output locations and batching

    Example:
        category: "CRM software"
        brands: ["HubSpot", "Salesforce", "Pipedrive"]
        provider:
          name: "openai"
          model_name: "gpt-4o"
        run_settings:
          output_dir: "./output"
    """

    category: str
    brands: list[str]
    prompts: list[str] = []
    provider: ProviderConfig = ProviderConfig()
    run_settings: RunSettings = RunSettings()

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _clean_category(v)

    @field_validator("brands")
    @classmethod
    def validate_brands(cls, v: list[str]) -> list[str]:
        return _clean_brands(v, MIN_BRANDS)

    @field_validator("prompts")
    @classmethod
    def validate_prompts(cls, v: list[str]) -> list[str]:
        """
        Validate custom prompts.

        An empty list means "use the built-in templates". Otherwise 1-20
        non-empty prompts of at most 500 characters each.
        """
        if not v:
            return v

        cleaned = [p.strip() for p in v if p and not p.isspace()]
        if not MIN_CUSTOM_PROMPTS <= len(cleaned) <= MAX_CUSTOM_PROMPTS:
            raise ValueError(
                f"between {MIN_CUSTOM_PROMPTS} and {MAX_CUSTOM_PROMPTS} "
                f"custom prompts allowed (got: {len(cleaned)})"
            )
        for i, prompt in enumerate(cleaned):
            if len(prompt) > MAX_CUSTOM_PROMPT_LENGTH:
                raise ValueError(
                    f"prompt {i + 1} exceeds {MAX_CUSTOM_PROMPT_LENGTH} characters"
                )
        return cleaned


class RuntimeProvider(BaseModel):
    """
    Resolved provider configuration with API key.

    Created by config.loader after applying provider defaults and reading the
    API key from the environment. This is what build_client() consumes.

    Attributes:
        name: Provider identifier
        display_name: Human-readable provider name
        model_name: Model identifier
        base_url: OpenAI-compatible endpoint root
        api_key: Resolved API key (NEVER log this)
        temperature: Sampling temperature
        max_tokens: Maximum answer length in tokens
    """

    name: str
    display_name: str
    model_name: str
    base_url: str
    api_key: str
    temperature: float
    max_tokens: int = DEFAULT_MAX_TOKENS

    @field_validator("model_name")
    @classmethod
    def validate_model_name(cls, v: str) -> str:
        """Validate model_name is non-empty."""
        if not v or v.isspace():
            raise ValueError("model_name cannot be empty")
        return v

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate API key is non-empty."""
        if not v or v.isspace():
            raise ValueError("API key cannot be empty")
        return v


class RuntimeConfig(BaseModel):
    """
    Runtime configuration with resolved provider.

    Created by config.loader; this is the contract passed to the runner.
    """

    category: str
    brands: list[str]
    prompts: list[str] = []
    provider: RuntimeProvider
    run_settings: RunSettings = RunSettings()


class RecordedExchange(BaseModel):
    """One prompt and the model answer it produced. Empty answers are allowed."""

    prompt: str
    response: str = ""

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        if not v or v.isspace():
            raise ValueError("prompt cannot be empty")
        return v

    @field_validator("response", mode="before")
    @classmethod
    def coerce_missing_response(cls, v):
        return "" if v is None else v


class ResponsesFile(BaseModel):
    """
    Recorded answers for offline analysis (the `analyze` command).

    Attributes:
        category: Product category the prompts were about
        brands: Brands to score (1-10 unique names)
        prompts: Recorded exchanges, at least one
        model_name: Optional label for the model that produced the answers

    Example:
        category: "CRM software"
        brands: ["HubSpot", "Salesforce"]
        prompts:
          - prompt: "What is the best CRM?"
            response: "HubSpot is a strong choice..."
    """

    category: str
    brands: list[str]
    prompts: list[RecordedExchange]
    model_name: str | None = None

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _clean_category(v)

    @field_validator("brands")
    @classmethod
    def validate_brands(cls, v: list[str]) -> list[str]:
        return _clean_brands(v, 1)

    @model_validator(mode="after")
    def validate_has_prompts(self) -> "ResponsesFile":
        """Validate at least one exchange was recorded."""
        if not self.prompts:
            raise ValueError("At least one recorded prompt is required")
        return self
