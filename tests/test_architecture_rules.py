"""Architecture enforcement tests for the adapter/transport/service layering.

Adapters translate payloads and never talk to the network; the transport owns
``httpx``; only the service façade wires the two together. These rules are
static-file scans so they run without import-time side effects.

Rules validated here:
1) Vendor adapter packages and ``base.adapter_parts`` never import ``httpx``.
2) Nothing under ``omnihai_providers.base`` imports the service layer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parent.parent / "omnihai_providers"
VENDOR_PACKAGES = ("openai", "anthropic", "google", "ollama", "openrouter", "meta", "mistral")


def _iter_python_files(root: Path) -> Iterable[Path]:
    """Yield source files under ``root``, skipping caches and test suites."""
    for path in root.rglob("*.py"):
        if "__pycache__" in path.parts or "tests" in path.parts:
            continue
        yield path


def _offenders(roots: Iterable[Path], forbidden: List[str]) -> List[str]:
    found: List[str] = []
    for root in roots:
        for py in _iter_python_files(root):
            src = py.read_text(encoding="utf-8", errors="replace")
            found.extend(f"{py}: contains '{snippet}'" for snippet in forbidden if snippet in src)
    return found


def test_adapters_do_not_touch_the_network() -> None:
    roots = [PACKAGE_ROOT / name for name in VENDOR_PACKAGES] + [PACKAGE_ROOT / "base" / "adapter_parts"]
    missing = [str(r) for r in roots if not r.is_dir()]
    assert not missing, f"expected adapter packages are missing: {missing}"  # nosec B101

    offenders = _offenders(roots, ["import httpx", "from httpx"])
    if offenders:
        pytest.fail("Adapters must stay free of network code; use the Transport.\n" + "\n".join(offenders))


def test_base_does_not_import_service_layer() -> None:
    offenders = _offenders(
        [PACKAGE_ROOT / "base"],
        ["from ..service", "from omnihai_providers.service", "import omnihai_providers.service"],
    )
    if offenders:
        pytest.fail("The base layer must not depend on the service façade.\n" + "\n".join(offenders))
