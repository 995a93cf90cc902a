"""Provider configuration resolution.

``get_provider_config(provider, overrides)`` merges four sources, the later
ones winning:

1. the built-in table in :mod:`.defaults` (display name, model, endpoint);
2. the provider's section of ``$PROVIDERS_CONFIG_FILE`` (JSON, or YAML when
   the file is not valid JSON);
3. ``<PROVIDER>_MODEL``, ``<PROVIDER>_API_KEY``, ``<PROVIDER>_BASE_URL`` and
   ``<PROVIDER>_SYSTEM_MESSAGE`` from the environment, after a one-time load
   of ``$DOTENV_FILE`` (default ``.env``);
4. explicit overrides passed by the caller (``None`` values are ignored).

A file section may also carry ``capabilities`` flags and extra ``headers``::

    mistral:
      model: mistral-large-2411
      capabilities:
        streaming: false

Placeholder values (see :func:`.env.is_placeholder`) never count as set.
:func:`resolve_provider_config` validates the merged mapping into a frozen
:class:`ProviderConfig`.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import PROVIDER_DEFAULTS, ProviderDefaults, get_provider_defaults
from .env import env_key, is_placeholder, load_dotenv_once
from .provider_config import ProviderConfig

ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "system_message": "SYSTEM_MESSAGE",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None


def _defaults_for(name: str) -> Dict[str, Any]:
    defaults: Optional[ProviderDefaults] = get_provider_defaults(name)
    if defaults is None:
        return {}
    return {"name": defaults.name, "model": defaults.model, "base_url": defaults.base_url}


def _load_external_config() -> Dict[str, Any]:
    """Return the parsed ``PROVIDERS_CONFIG_FILE`` (cached per path)."""
    global _FILE_CACHE, _FILE_CACHE_PATH
    path = os.getenv("PROVIDERS_CONFIG_FILE")
    if _FILE_CACHE is not None and _FILE_CACHE_PATH == path:
        return _FILE_CACHE
    data: Any = {}
    if path and Path(path).is_file():
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError:
            data = yaml.safe_load(text) or {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    _FILE_CACHE_PATH = path
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(env_key(provider, suffix))
        if val is not None and val.strip() and not is_placeholder(val):
            out[field] = val
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides
    """
    load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    # 1. Defaults
    cfg |= _defaults_for(name)

    # 2. External config file section
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    # 3. Env overrides
    cfg |= _env_overrides(name)

    # 4. Explicit overrides arg
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def resolve_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> ProviderConfig:
    """Merged and validated configuration; raises ``ValueError`` naming a missing setting."""
    return ProviderConfig.from_mapping(provider, get_provider_config(provider, overrides))


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


def clear_config_cache() -> None:
    global _FILE_CACHE, _FILE_CACHE_PATH
    _FILE_CACHE = None
    _FILE_CACHE_PATH = None


__all__ = [
    "ProviderConfig",
    "PROVIDER_DEFAULTS",
    "get_provider_config",
    "resolve_provider_config",
    "get_model",
    "clear_config_cache",
]
