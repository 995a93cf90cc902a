"""Adapter Factory utilities.

Purpose
-------
Map a canonical provider id to its protocol adapter. Adapter modules are
imported lazily using ``importlib`` so importing the factory pulls in no
vendor code, and each module exposes a ``create_adapter()`` entry point.

Adapters are stateless, so one instance per provider is created and cached.

Scope
-----
Supported providers: ``openai``, ``anthropic``, ``google``, ``ollama``,
``openrouter``, ``meta`` and ``mistral``.
"""

from __future__ import annotations

import threading
from importlib import import_module
from typing import Any, Dict, Tuple

from .adapter_parts.protocol import ProtocolAdapter


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized.

    Failure modes include:
    - The provider id is not registered in the factory mapping.
    - The provider module cannot be imported or lacks the entry point.
    - The entry point returned something that is not a protocol adapter.
    """


class AdapterFactory:
    """Resolve protocol adapters by canonical provider id (e.g., ``"openai"``)."""

    # Map canonical provider names to import paths and entry points
    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "omnihai_providers.openai.adapter", "factory": "create_adapter"},
        "anthropic": {"module": "omnihai_providers.anthropic.adapter", "factory": "create_adapter"},
        "google": {"module": "omnihai_providers.google.adapter", "factory": "create_adapter"},
        "ollama": {"module": "omnihai_providers.ollama.adapter", "factory": "create_adapter"},
        "openrouter": {"module": "omnihai_providers.openrouter.adapter", "factory": "create_adapter"},
        "meta": {"module": "omnihai_providers.meta.adapter", "factory": "create_adapter"},
        "mistral": {"module": "omnihai_providers.mistral.adapter", "factory": "create_adapter"},
    }

    _instances: Dict[str, ProtocolAdapter] = {}
    _lock = threading.Lock()

    @classmethod
    def create(cls, provider: str) -> ProtocolAdapter:
        """Return the adapter for ``provider``.

        Raises
        ------
        UnknownProviderError
            If the provider is unknown, its module fails to import, or the
            entry point is missing or returns a non-adapter.
        """
        name = (provider or "").lower().strip()
        entry = cls._PROVIDERS.get(name)
        if not entry:
            raise UnknownProviderError(f"Unknown provider '{provider}'; supported: {', '.join(cls.supported())}")

        with cls._lock:
            cached = cls._instances.get(name)
            if cached is not None:
                return cached

            module_path, factory_name = entry["module"], entry["factory"]
            try:
                mod = import_module(module_path)
            except ImportError as exc:  # pragma: no cover - import failure path
                raise UnknownProviderError(
                    f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
                ) from exc

            try:
                factory: Any = getattr(mod, factory_name)
            except AttributeError as exc:
                raise UnknownProviderError(
                    f"Entry point '{factory_name}' not found in '{module_path}' for provider '{provider}'"
                ) from exc

            adapter = factory()
            if not isinstance(adapter, ProtocolAdapter):
                raise UnknownProviderError(f"'{module_path}.{factory_name}' did not return a protocol adapter")
            cls._instances[name] = adapter
            return adapter

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the tuple of supported canonical provider names."""
        return tuple(cls._PROVIDERS.keys())


def create_adapter(provider: str) -> ProtocolAdapter:
    """Compatibility helper that delegates to :meth:`AdapterFactory.create`."""
    return AdapterFactory.create(provider)


__all__ = ["AdapterFactory", "UnknownProviderError", "create_adapter"]
