"""
Custom exceptions for AI Visibility Tracker.

The response-analysis engine never raises for well-typed input, so every
exception here belongs to a collaborator: configuration loading, the SQLite
history store, or the language-model client.

Exception Hierarchy:
    VisibilityTrackerError (base)
    ├── ConfigurationError
    │   ├── ConfigFileNotFoundError
    │   ├── ConfigValidationError
    │   ├── APIKeyMissingError
    │   └── ResponsesFileError
    ├── DatabaseError
    │   ├── DatabaseInitError
    │   └── DatabaseQueryError
    └── LLMProviderError
        ├── LLMAuthenticationError
        ├── LLMRateLimitError
        ├── LLMTimeoutError
        └── LLMResponseError

Usage:
    from ai_visibility_tracker.exceptions import ConfigurationError

    try:
        config = load_config(path)
    except ConfigFileNotFoundError as e:
        logger.error(f"Config file not found: {e}")
        sys.exit(1)
"""


class VisibilityTrackerError(Exception):
    """
    Base exception for all AI Visibility Tracker errors.

    Catching this class catches every application-specific error.
    """

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(VisibilityTrackerError):
    """
    Base class for configuration-related errors.

    Raised when configuration loading, parsing, or validation fails.
    Results in exit code 1 from the CLI.
    """

    pass


class ConfigFileNotFoundError(ConfigurationError):
    """
    Configuration file does not exist at the specified path.

    Example:
        raise ConfigFileNotFoundError("/path/to/tracker.config.yaml")
    """

    pass


class ConfigValidationError(ConfigurationError):
    """
    Configuration file is invalid (schema validation failed).

    Example:
        raise ConfigValidationError("brands: Please provide at least 2 brands")
    """

    pass


class APIKeyMissingError(ConfigurationError):
    """
    Required API key environment variable is not set.

    Example:
        raise APIKeyMissingError("OPENAI_API_KEY environment variable not set")
    """

    pass


class ResponsesFileError(ConfigurationError):
    """
    Recorded prompt/response file for offline analysis is missing or invalid.

    Example:
        raise ResponsesFileError("prompts.0.response: Field required")
    """

    pass


# ============================================================================
# Database Errors
# ============================================================================


class DatabaseError(VisibilityTrackerError):
    """
    Base class for database-related errors.

    Results in exit code 2 from the CLI.
    """

    pass


class DatabaseInitError(DatabaseError):
    """
    Database initialization or schema migration failed.

    Example:
        raise DatabaseInitError("Failed to create database: permission denied")
    """

    pass


class DatabaseQueryError(DatabaseError):
    """
    Database query execution failed.

    Example:
        raise DatabaseQueryError("Failed to insert analysis: constraint violation")
    """

    pass


# ============================================================================
# LLM Provider Errors
# ============================================================================


class LLMProviderError(VisibilityTrackerError):
    """
    Base class for language-model provider errors.

    Any failed prompt aborts response collection; results in exit code 3.
    """

    pass


class LLMAuthenticationError(LLMProviderError):
    """
    Provider rejected the API key. Never retried.

    Example:
        raise LLMAuthenticationError("Invalid API key.")
    """

    pass


class LLMRateLimitError(LLMProviderError):
    """
    Provider rate limit still exceeded after all retry attempts.

    Example:
        raise LLMRateLimitError("Rate limit exceeded. Please retry shortly.")
    """

    pass


class LLMTimeoutError(LLMProviderError):
    """
    Provider request timed out after all retry attempts.

    Example:
        raise LLMTimeoutError("Request to openai timed out after 120s")
    """

    pass


class LLMResponseError(LLMProviderError):
    """
    Provider returned an invalid, empty, or unusable response.

    Example:
        raise LLMResponseError('Model "gpt-9" not found.')
    """

    pass
