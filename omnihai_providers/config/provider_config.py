"""Typed, validated provider configuration.

Purpose
-------
Turn the merged configuration mapping of :func:`get_provider_config` into a
frozen object the service façade can trust: provider id, display name, model,
API key, endpoint, optional default system message, extra headers and
capability overrides.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation.

Failure modes
-------------
- A missing model, endpoint or (where required) API key raises ``ValueError``
  naming the environment variable that would supply it.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .defaults import get_provider_defaults
from .env import env_key, is_placeholder


class ProviderConfig(BaseModel):
    """Resolved settings for one service instance.

    Attributes
    ----------
    provider:
        Canonical provider id (``"openai"``).
    name:
        Display name used in messages (``"OpenAI"``).
    model:
        Model identifier sent on the wire.
    api_key:
        Credential; ``None`` for keyless providers such as a local Ollama.
    base_url:
        API root every request path is resolved against.
    system_message:
        Default system prompt applied when a call does not set one.
    headers:
        Static headers added to every request.
    capabilities:
        Capability flag overrides (``{"streaming": False}``) applied on top of
        the adapter's model-derived table.
    """

    model_config = ConfigDict(frozen=True)

    provider: str
    name: str
    model: str
    api_key: Optional[str] = Field(default=None, repr=False)
    base_url: str
    system_message: Optional[str] = None
    headers: Mapping[str, str] = Field(default_factory=dict)
    capabilities: Dict[str, bool] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, provider: str, cfg: Mapping[str, Any]) -> "ProviderConfig":
        """Validate a merged configuration mapping.

        Raises
        ------
        ValueError
            When a required setting is missing or still a placeholder.
        """
        name = (provider or "").lower().strip()
        defaults = get_provider_defaults(name)
        key_required = defaults.api_key_required if defaults else True

        def _required(field: str, suffix: str) -> str:
            value = cfg.get(field)
            if not value or not str(value).strip() or is_placeholder(value):
                raise ValueError(f"{field} is required for provider '{name}'; set {env_key(name, suffix)}")
            return str(value).strip()

        api_key = _required("api_key", "API_KEY") if key_required else (cfg.get("api_key") or None)
        return cls(
            provider=name,
            name=cfg.get("name") or (defaults.name if defaults else name),
            model=_required("model", "MODEL"),
            api_key=api_key,
            base_url=_required("base_url", "BASE_URL"),
            system_message=cfg.get("system_message") or None,
            headers=dict(cfg.get("headers") or {}),
            capabilities=dict(cfg.get("capabilities") or {}),
        )


__all__ = ["ProviderConfig"]
