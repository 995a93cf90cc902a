"""JSON parsing and path extraction helpers shared by all protocol adapters.

Path syntax
-----------
A path is a dot-separated list of property names, each optionally followed by
one bracket selector:

- ``a.b.c``: nested property lookup.
- ``a.b[0].c``: ``[n]`` selects the n-th element of the array at ``b``.
- ``a.b[*].c``: ``[*]`` fans out over every element of the array at ``b``; the
  rest of the path is evaluated against each element and the successful leaf
  values are concatenated in document order.

Missing keys, ``null`` values, non-array values under a bracket selector and
out-of-range indexes all yield "not found" (``None`` / empty list). A bracket
selector that is neither ``*`` nor an integer is a programming error in the
path literal and raises ``ValueError``.

Leaf values are strings as-is; other JSON leaves (numbers, booleans, objects,
arrays) are returned as their compact JSON text. Empty strings are never
returned, whitespace-only strings are (a single space can be a streamed
token). :func:`find_first_non_blank_by_path` is the multi-path variant and
strips its results, so there whitespace-only values do count as missing.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .errors import MalformedResponseError, VendorReportedError

DEFAULT_ERROR_PATHS: tuple[str, ...] = ("error.message", "error")


def parse_json(body: str, parse_float: Optional[Callable[[str], Any]] = None) -> Dict[str, Any]:
    """Parse a JSON object out of ``body``.

    Text before the first ``{`` and after the last ``}`` is discarded, which
    tolerates markdown code fences around model output. Anything that does not
    yield a JSON object raises :class:`MalformedResponseError`.
    ``parse_float`` is handed to :func:`json.loads` unchanged.
    """
    if body is None:
        raise MalformedResponseError("Cannot parse json", body)
    start = body.find("{")
    end = body.rfind("}")
    if start < 0 or end < start:
        raise MalformedResponseError("Cannot parse json", body)
    try:
        parsed = json.loads(body[start : end + 1], parse_float=parse_float)
    except ValueError as exc:
        raise MalformedResponseError("Cannot parse json", body, raw=exc) from exc
    if not isinstance(parsed, dict):
        raise MalformedResponseError("Cannot parse json", body)
    return parsed


def parse_and_check_errors(body: str, error_paths: Sequence[str] = DEFAULT_ERROR_PATHS) -> Dict[str, Any]:
    """Parse ``body`` and raise :class:`VendorReportedError` if it carries an error.

    The first non-blank value at ``error_paths`` becomes the error message,
    verbatim.
    """
    document = parse_json(body)
    message = find_first_non_blank_by_path(document, error_paths)
    if message is not None:
        raise VendorReportedError(message, body)
    return document


def _split_segment(segment: str) -> tuple[str, Optional[str]]:
    """Split ``name[selector]`` into ``(name, selector)``; no bracket gives ``(name, None)``."""
    open_at = segment.find("[")
    if open_at < 0:
        return segment, None
    if not segment.endswith("]"):
        raise ValueError(f"Malformed path segment: {segment!r}")
    selector = segment[open_at + 1 : -1].strip()
    if selector != "*":
        try:
            int(selector)
        except ValueError:
            raise ValueError(f"Malformed array index in path segment: {segment!r}") from None
    return segment[:open_at], selector


def _leaf_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _walk(node: Any, segments: Sequence[tuple[str, Optional[str]]], out: List[str]) -> None:
    if node is None:
        return
    if not segments:
        text = _leaf_text(node)
        if text:
            out.append(text)
        return
    name, selector = segments[0]
    rest = segments[1:]
    if name:
        if not isinstance(node, dict):
            return
        node = node.get(name)
        if node is None:
            return
    if selector is None:
        _walk(node, rest, out)
        return
    if not isinstance(node, list):
        return
    if selector == "*":
        for element in node:
            _walk(element, rest, out)
        return
    index = int(selector)
    if 0 <= index < len(node):
        _walk(node[index], rest, out)


def find_all_by_path(document: Any, path: str) -> List[str]:
    """Return every non-empty leaf value at ``path``, in document order."""
    if not path:
        raise ValueError("Path may not be empty")
    segments = [_split_segment(segment) for segment in path.split(".")]
    out: List[str] = []
    _walk(document, segments, out)
    return out


def find_by_path(document: Any, path: str) -> Optional[str]:
    """Return the first non-empty leaf value at ``path``, or ``None`` when not found.

    Whitespace-only values are returned unchanged.
    """
    values = find_all_by_path(document, path)
    return values[0] if values else None


def find_first_non_blank_by_path(document: Any, paths: Iterable[str]) -> Optional[str]:
    """Try ``paths`` in order and return the first value that is non-blank after stripping.

    The returned value is stripped. ``None`` when no path yields such a value.
    """
    for path in paths:
        for value in find_all_by_path(document, path):
            stripped = value.strip()
            if stripped:
                return stripped
    return None


__all__ = [
    "DEFAULT_ERROR_PATHS",
    "parse_json",
    "parse_and_check_errors",
    "find_all_by_path",
    "find_by_path",
    "find_first_non_blank_by_path",
]
