"""
Parsed model version used for capability and payload decisions.

A raw model identifier such as ``gpt-5-mini``, ``claude-3-5-sonnet-20241022``
or ``gemini-2.5-flash`` is reduced to a ``(model_name, major, minor)`` triple:

- ``model_name`` is the text up to the last letter before the first digit
  (``gpt``, ``claude``, ``gemini``; ``anthropic.claude`` for
  ``anthropic.claude-3-haiku``).
- ``major`` is the first run of digits.
- ``minor`` is the run of digits after the first non-alphanumeric separator
  that directly follows the major version. A letter directly after the major
  version means there is no minor version (``gpt-4o`` is 4.0).

Ordering comparisons only hold within one model family: the family names must
contain one another (case-insensitive). Across families every ordering
comparison is ``False``, so ``AIModelVersion.of("gpt-4o") < CLAUDE_3`` and
``AIModelVersion.of("gpt-4o") >= CLAUDE_3`` are both false.
"""
from __future__ import annotations

from dataclasses import dataclass


def _model_prefix(full_model_name: str) -> str:
    last_letter = -1
    for i, c in enumerate(full_model_name):
        if c.isdigit():
            break
        if c.isalpha():
            last_letter = i
    return full_model_name[: last_letter + 1] if last_letter >= 0 else full_model_name


def _major_version(full_model_name: str) -> int:
    digits = ""
    for c in full_model_name:
        if c.isdigit():
            digits += c
        elif digits:
            break
    return int(digits) if digits else 0


def _minor_version(full_model_name: str) -> int:
    found_major = False
    found_separator = False
    digits = ""
    for c in full_model_name:
        if not found_major:
            found_major = c.isdigit()
        elif not found_separator:
            if c.isdigit():
                continue
            if c.isalnum():
                break
            found_separator = True
        elif c.isdigit():
            digits += c
        else:
            break
    return int(digits) if digits else 0


@dataclass(frozen=True)
class AIModelVersion:
    """Model family name plus major/minor version.

    Attributes:
        model_name: Family name, stripped, never blank.
        major: Major version (non-negative).
        minor: Minor version (non-negative).
    """

    model_name: str
    major: int = 0
    minor: int = 0

    def __post_init__(self) -> None:
        if self.model_name is None or not self.model_name.strip():
            raise ValueError("Model name may not be blank")
        if self.major < 0:
            raise ValueError("Major version may not be negative")
        if self.minor < 0:
            raise ValueError("Minor version may not be negative")
        object.__setattr__(self, "model_name", self.model_name.strip())

    @classmethod
    def of(cls, full_model_name: str) -> "AIModelVersion":
        """Parse a raw model identifier, e.g. ``AIModelVersion.of("gpt-5-mini")``."""
        if full_model_name is None or not full_model_name.strip():
            raise ValueError("Model name may not be blank")
        return cls(_model_prefix(full_model_name), _major_version(full_model_name), _minor_version(full_model_name))

    def _matches_family(self, other: "AIModelVersion") -> bool:
        this_name = self.model_name.lower()
        other_name = _model_prefix(other.model_name).lower()
        return other_name in this_name or this_name in other_name

    def _compare_version(self, other: "AIModelVersion") -> int:
        mine = (self.major, self.minor)
        theirs = (other.major, other.minor)
        return (mine > theirs) - (mine < theirs)

    def lt(self, other: "AIModelVersion") -> bool:
        return self._matches_family(other) and self._compare_version(other) < 0

    def lte(self, other: "AIModelVersion") -> bool:
        return self._matches_family(other) and self._compare_version(other) <= 0

    def gt(self, other: "AIModelVersion") -> bool:
        return self._matches_family(other) and self._compare_version(other) > 0

    def gte(self, *others: "AIModelVersion") -> bool:
        """True when this version is at or above any of ``others`` within its family."""
        return any(self._matches_family(o) and self._compare_version(o) >= 0 for o in others)

    def eq(self, other: "AIModelVersion") -> bool:
        """Same family and same major/minor. Not the same as ``==``, which compares fields."""
        return self._matches_family(other) and self._compare_version(other) == 0

    def ne(self, other: "AIModelVersion") -> bool:
        return not self.eq(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AIModelVersion):
            return NotImplemented
        return self.lt(other)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, AIModelVersion):
            return NotImplemented
        return self.lte(other)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, AIModelVersion):
            return NotImplemented
        return self.gt(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, AIModelVersion):
            return NotImplemented
        return self.gte(other)

    def sort_key(self) -> tuple[str, int, int]:
        """Total order for sorting: family name (case-insensitive), then major, then minor."""
        return (self.model_name.lower(), self.major, self.minor)

    def __str__(self) -> str:
        return f"{self.model_name} {self.major}.{self.minor}"


__all__ = ["AIModelVersion"]
