"""
Moderation option and result models.

``ModerationOptions`` is a validated Pydantic model (non-empty category set,
threshold in ``[0.0, 1.0]``). ``ModerationResult`` is a plain frozen value:
a flagged bit plus a sorted category-to-score map, with every derived query
computed from that map.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, FrozenSet, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_THRESHOLD = 0.5
STRICT_THRESHOLD = 0.2
LENIENT_THRESHOLD = 0.7

_CATEGORY_NAME = re.compile(r"^[\w-]+$")


class ModerationCategory(str, Enum):
    """Known moderation categories; ``openai_native`` marks those the OpenAI endpoint scores."""

    SEXUAL = "sexual"
    HARASSMENT = "harassment"
    HATE = "hate"
    ILLICIT = "illicit"
    SELF_HARM = "self-harm"
    VIOLENCE = "violence"
    PII = "pii"
    SPAM = "spam"
    PROFANITY = "profanity"

    @property
    def openai_native(self) -> bool:
        return self.value in OPENAI_NATIVE_CATEGORIES


OPENAI_NATIVE_CATEGORIES: FrozenSet[str] = frozenset(
    {"sexual", "harassment", "hate", "illicit", "self-harm", "violence"}
)
ALL_CATEGORIES: FrozenSet[str] = frozenset(c.value for c in ModerationCategory)


class ModerationOptions(BaseModel):
    """Categories to score and the flagging threshold."""

    model_config = ConfigDict(frozen=True)

    categories: FrozenSet[str] = Field(default=OPENAI_NATIVE_CATEGORIES)
    threshold: float = Field(default=DEFAULT_THRESHOLD, ge=0.0, le=1.0)

    DEFAULT: ClassVar["ModerationOptions"]
    STRICT: ClassVar["ModerationOptions"]
    LENIENT: ClassVar["ModerationOptions"]

    @field_validator("categories", mode="before")
    @classmethod
    def _normalize_categories(cls, value: Iterable[object]) -> FrozenSet[str]:
        names = set()
        for item in value:
            name = item.value if isinstance(item, ModerationCategory) else str(item)
            if not _CATEGORY_NAME.match(name):
                raise ValueError(f"{name!r} may only contain word characters or hyphens")
            names.add(name.lower())
        if not names:
            raise ValueError("categories may not be empty")
        return frozenset(names)

    def sorted_categories(self) -> list[str]:
        return sorted(self.categories)

    def add_categories(self, *names: str) -> "ModerationOptions":
        """Return a copy with extra (custom) category names."""
        return type(self)(categories=self.categories | set(names), threshold=self.threshold)

    def with_threshold(self, threshold: float) -> "ModerationOptions":
        return type(self)(categories=self.categories, threshold=threshold)


ModerationOptions.DEFAULT = ModerationOptions()
ModerationOptions.STRICT = ModerationOptions(threshold=STRICT_THRESHOLD)
ModerationOptions.LENIENT = ModerationOptions(threshold=LENIENT_THRESHOLD)


@dataclass(frozen=True)
class ModerationResult:
    """Outcome of a moderation call.

    ``flagged`` is decided by the codec that produced the result; the per
    category helpers apply the same strict ``score > threshold`` rule.
    """

    flagged: bool
    scores: Mapping[str, float] = field(default_factory=dict)

    SAFE: ClassVar["ModerationResult"]

    def __post_init__(self) -> None:
        object.__setattr__(self, "scores", dict(sorted((k, float(v)) for k, v in self.scores.items())))

    @classmethod
    def evaluate(cls, scores: Mapping[str, float], threshold: float = DEFAULT_THRESHOLD) -> "ModerationResult":
        """Build a result whose ``flagged`` bit is any score strictly above ``threshold``."""
        return cls(flagged=any(score > threshold for score in scores.values()), scores=scores)

    def score(self, category: str) -> float:
        return self.scores.get(category, 0.0)

    def is_flagged(self, category: str, threshold: float = DEFAULT_THRESHOLD) -> bool:
        return self.score(category) > threshold

    def flagged_categories(self, threshold: float = DEFAULT_THRESHOLD) -> Dict[str, float]:
        return {k: v for k, v in self.scores.items() if v > threshold}

    def highest_category(self) -> Optional[str]:
        if not self.scores:
            return None
        return max(self.scores, key=self.scores.__getitem__)

    def highest_score(self) -> float:
        return max(self.scores.values(), default=0.0)


ModerationResult.SAFE = ModerationResult(flagged=False, scores={})


__all__ = [
    "DEFAULT_THRESHOLD",
    "STRICT_THRESHOLD",
    "LENIENT_THRESHOLD",
    "ModerationCategory",
    "OPENAI_NATIVE_CATEGORIES",
    "ALL_CATEGORIES",
    "ModerationOptions",
    "ModerationResult",
]
