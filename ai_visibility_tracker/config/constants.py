"""
Configuration constants for AI Visibility Tracker.

Global limits, prompt templates, and provider defaults shared across modules.
"""

# Maximum prompt length sent to a provider (characters)
MAX_PROMPT_LENGTH = 100_000

# Input limits for an analysis request
MIN_CATEGORY_LENGTH = 2
MAX_CATEGORY_LENGTH = 100
MIN_BRANDS = 2
MAX_BRANDS = 10
MAX_BRAND_NAME_LENGTH = 50
MIN_CUSTOM_PROMPTS = 1
MAX_CUSTOM_PROMPTS = 20
MAX_CUSTOM_PROMPT_LENGTH = 500

# Prompts queried concurrently per batch
DEFAULT_BATCH_SIZE = 10
MAX_BATCH_SIZE = 50

# Prompt coverage thresholds (%) for display labels
VISIBILITY_THRESHOLDS = {
    "high": 60,
    "medium": 30,
}

# Templates mimic real user questions about a product category
PROMPT_TEMPLATES = (
    "What is the best {category}? Please provide specific product recommendations with their official website URLs.",
    "Top 5 {category} for startups - include the direct URLs to each product's homepage.",
    "Which {category} is most affordable? List options with links to their official websites and pricing pages.",
    "Compare the top {category} options by providing URLs to each product's main website.",
    "Recommend the best {category} for a small business - include direct links to the products.",
    "Best {category} for small businesses in 2025 - provide URLs to the official websites.",
    "What are the most popular {category} right now? Include links to their websites.",
    "{category} with the best features - provide URLs to the official product pages.",
    "Which {category} is easiest to use? Include URLs to try or learn more about each option.",
    "Best {category} for enterprise teams - provide direct URLs to product pages and documentation.",
)

# API key value shipped in sample .env files; treated as unset
PLACEHOLDER_API_KEY = "sk-your-openai-api-key-here"

DEFAULT_MAX_TOKENS = 4000

# Provider defaults for OpenAI-compatible chat completion endpoints.
# env_api_key None means the provider needs no key (local Ollama).
PROVIDER_DEFAULTS = {
    "openai": {
        "display_name": "OpenAI",
        "base_url": "https://api.openai.com/v1",
        "model_name": "gpt-4o",
        "env_api_key": "OPENAI_API_KEY",
        "temperature": 0.4,
    },
    "ollama": {
        "display_name": "Ollama (Local)",
        "base_url": "http://localhost:11434/v1",
        "model_name": "llama3.2",
        "env_api_key": None,
        "temperature": 0.4,
    },
    "xai": {
        "display_name": "xAI (Grok)",
        "base_url": "https://api.x.ai/v1",
        "model_name": "grok-4-latest",
        "env_api_key": "XAI_API_KEY",
        "temperature": 0.4,
    },
    "google": {
        "display_name": "Google (Gemini)",
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai",
        "model_name": "gemini-2.5-flash",
        "env_api_key": "GOOGLE_API_KEY",
        "temperature": 0.5,
    },
}

# Ollama accepts any bearer token
OLLAMA_API_KEY = "ollama"
