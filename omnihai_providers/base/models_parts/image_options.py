"""
Options for image generation requests.

``size`` (``"<W>x<H>"``) and ``aspect_ratio`` (``"<W>:<H>"``) describe the same
thing for different vendors: OpenAI takes a size, Google an aspect ratio.
Giving an explicit size derives the reduced aspect ratio from it.
"""
from __future__ import annotations

import re
from math import gcd
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_SIZE = "auto"
DEFAULT_ASPECT_RATIO = "1:1"
DEFAULT_QUALITY = "auto"
DEFAULT_OUTPUT_FORMAT = "png"

_SIZE = re.compile(r"^\d+x\d+$")
_ASPECT_RATIO = re.compile(r"^\d+:\d+$")


class GenerateImageOptions(BaseModel):
    """Size, aspect ratio, quality and output format of a generated image."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    size: str = Field(default=DEFAULT_SIZE)
    aspect_ratio: str = Field(default=DEFAULT_ASPECT_RATIO)
    quality: str = Field(default=DEFAULT_QUALITY, min_length=1)
    output_format: str = Field(default=DEFAULT_OUTPUT_FORMAT, min_length=1)

    DEFAULT: ClassVar["GenerateImageOptions"]

    @model_validator(mode="before")
    @classmethod
    def _derive_aspect_ratio(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        size = data.get("size", DEFAULT_SIZE)
        if size != DEFAULT_SIZE:
            if not isinstance(size, str) or not _SIZE.match(size):
                raise ValueError(f"Invalid size: {size}")
            width, height = (int(part) for part in size.split("x"))
            divisor = gcd(width, height) or 1
            data = {**data, "aspect_ratio": f"{width // divisor}:{height // divisor}"}
        ratio = data.get("aspect_ratio", DEFAULT_ASPECT_RATIO)
        if not isinstance(ratio, str) or not _ASPECT_RATIO.match(ratio):
            raise ValueError(f"Invalid aspect ratio: {ratio}")
        return data


GenerateImageOptions.DEFAULT = GenerateImageOptions()


__all__ = ["GenerateImageOptions"]
