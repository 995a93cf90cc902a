"""
Chat options DTO validated with Pydantic.

Purpose
-------
Carry the sampling controls of one chat call (system prompt, temperature,
max tokens, top-p, structured output schema). Instances are frozen; bounds are
validated at construction and every derived copy is re-validated, so adapters
can trust the values without re-checking them.

Failure modes
-------------
Out-of-range values raise ``pydantic.ValidationError`` (a ``ValueError``).
"""
from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TEMPERATURE = 0.7
CREATIVE_TEMPERATURE = 1.2
DETERMINISTIC_TEMPERATURE = 0.0
DEFAULT_TOP_P = 1.0


class ChatOptions(BaseModel):
    """Sampling and formatting controls for a chat call.

    Attributes:
        system_prompt: Optional system instruction.
        temperature: Sampling temperature in ``[0.0, 2.0]``.
        max_tokens: Optional positive cap on generated tokens.
        top_p: Nucleus sampling in ``[0.0, 1.0]``.
        json_schema: Optional JSON Schema requesting structured output.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    system_prompt: Optional[str] = None
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    top_p: float = Field(default=DEFAULT_TOP_P, ge=0.0, le=1.0)
    json_schema: Optional[Dict[str, Any]] = None

    DEFAULT: ClassVar["ChatOptions"]
    CREATIVE: ClassVar["ChatOptions"]
    DETERMINISTIC: ClassVar["ChatOptions"]

    def derive(self, **changes: Any) -> "ChatOptions":
        """Return a validated copy with ``changes`` applied."""
        return type(self).model_validate({**self.model_dump(), **changes})

    def with_system_prompt(self, system_prompt: Optional[str]) -> "ChatOptions":
        return self.derive(system_prompt=system_prompt)

    def with_json_schema(self, json_schema: Optional[Dict[str, Any]]) -> "ChatOptions":
        return self.derive(json_schema=json_schema)


ChatOptions.DEFAULT = ChatOptions()
ChatOptions.CREATIVE = ChatOptions(temperature=CREATIVE_TEMPERATURE)
ChatOptions.DETERMINISTIC = ChatOptions(temperature=DETERMINISTIC_TEMPERATURE)


__all__ = [
    "ChatOptions",
    "DEFAULT_TEMPERATURE",
    "CREATIVE_TEMPERATURE",
    "DETERMINISTIC_TEMPERATURE",
    "DEFAULT_TOP_P",
]
