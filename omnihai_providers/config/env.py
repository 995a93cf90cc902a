"""omnihai_providers.config.env
============================

Environment helpers shared by the configuration layer.

Purpose
-------
- Detect placeholder credentials (``changeme``, ``<placeholder>`` style values)
  so they never shadow real ones.
- Load a ``.env`` file once per process without an extra dependency.

Failure Modes
-------------
- Helpers never raise on a missing file or unset variable; callers decide how
  to proceed.
"""

from __future__ import annotations

import os
from typing import Optional

_dotenv_loaded = False


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def env_key(provider: str, suffix: str) -> str:
    """``env_key("openai", "API_KEY")`` -> ``"OPENAI_API_KEY"``."""
    return f"{provider.upper()}_{suffix}"


def load_dotenv_once() -> None:
    """Parse ``KEY=VALUE`` lines of ``$DOTENV_FILE`` (default ``.env``) into ``os.environ``.

    Comments and blank lines are ignored. Existing variables are replaced only
    when their current value is a placeholder.
    """
    global _dotenv_loaded
    if _dotenv_loaded:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _dotenv_loaded = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _dotenv_loaded = True


def reset_dotenv_state() -> None:
    """Forget that ``.env`` was loaded (tests point ``DOTENV_FILE`` elsewhere)."""
    global _dotenv_loaded
    _dotenv_loaded = False


__all__ = ["is_placeholder", "env_key", "load_dotenv_once", "reset_dotenv_state"]
