"""omnihai_providers.config.defaults
=================================

Central place for the built-in provider table: display name, default model,
default endpoint and whether an API key is mandatory. These defaults can be
overridden via environment variables or external configuration.

This module intentionally avoids importing from other provider packages to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class ProviderDefaults:
    """Built-in settings for one provider id."""

    name: str
    model: str
    base_url: str
    api_key_required: bool = True


# ---- Provider-specific sane defaults ----
OPENAI_DEFAULT_MODEL = "gpt-5-mini"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"

GOOGLE_DEFAULT_MODEL = "gemini-2.5-flash"
GOOGLE_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

MISTRAL_DEFAULT_MODEL = "mistral-medium-2508"
MISTRAL_DEFAULT_BASE_URL = "https://api.mistral.ai/v1"

META_DEFAULT_MODEL = "Llama-4-Scout-17B-16E-Instruct-FP8"
META_DEFAULT_BASE_URL = "https://api.llama.com/v1"

OPENROUTER_DEFAULT_MODEL = "deepseek/deepseek-v3.2"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

# Ollama (local daemon) defaults
OLLAMA_DEFAULT_MODEL = "gemma3"
OLLAMA_DEFAULT_BASE_URL = "http://localhost:11434"


PROVIDER_DEFAULTS: Dict[str, ProviderDefaults] = {
    "openai": ProviderDefaults("OpenAI", OPENAI_DEFAULT_MODEL, OPENAI_DEFAULT_BASE_URL),
    "anthropic": ProviderDefaults("Anthropic", ANTHROPIC_DEFAULT_MODEL, ANTHROPIC_DEFAULT_BASE_URL),
    "google": ProviderDefaults("Google AI", GOOGLE_DEFAULT_MODEL, GOOGLE_DEFAULT_BASE_URL),
    "mistral": ProviderDefaults("Mistral AI", MISTRAL_DEFAULT_MODEL, MISTRAL_DEFAULT_BASE_URL),
    "meta": ProviderDefaults("Meta AI", META_DEFAULT_MODEL, META_DEFAULT_BASE_URL),
    "openrouter": ProviderDefaults("OpenRouter", OPENROUTER_DEFAULT_MODEL, OPENROUTER_DEFAULT_BASE_URL),
    "ollama": ProviderDefaults("Ollama", OLLAMA_DEFAULT_MODEL, OLLAMA_DEFAULT_BASE_URL, api_key_required=False),
}


def get_provider_defaults(provider: str) -> Optional[ProviderDefaults]:
    return PROVIDER_DEFAULTS.get((provider or "").lower().strip())


__all__ = [
    "ProviderDefaults",
    "PROVIDER_DEFAULTS",
    "get_provider_defaults",
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "GOOGLE_DEFAULT_MODEL",
    "GOOGLE_DEFAULT_BASE_URL",
    "MISTRAL_DEFAULT_MODEL",
    "MISTRAL_DEFAULT_BASE_URL",
    "META_DEFAULT_MODEL",
    "META_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_MODEL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "OLLAMA_DEFAULT_MODEL",
    "OLLAMA_DEFAULT_BASE_URL",
]
