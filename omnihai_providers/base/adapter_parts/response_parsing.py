"""Non-streaming response parsing shared by all adapters.

Each helper parses the body, raises :class:`VendorReportedError` when the
body carries an error object and otherwise extracts the first non-blank value
found at the adapter's declared paths. Finding nothing raises
:class:`MalformedResponseError`; an empty string is never returned.
"""
from __future__ import annotations

import base64
import binascii
from typing import Sequence

from ..errors import MalformedResponseError
from ..json_path import DEFAULT_ERROR_PATHS, find_first_non_blank_by_path, parse_and_check_errors


def _extract(body: str, paths: Sequence[str], what: str, error_paths: Sequence[str]) -> str:
    if not paths:
        raise ValueError(f"{what} paths may not be empty")
    document = parse_and_check_errors(body, error_paths)
    value = find_first_non_blank_by_path(document, paths)
    if value is None:
        raise MalformedResponseError(f"No {what} found at paths {list(paths)}", body)
    return value


def parse_chat_response(
    body: str,
    content_paths: Sequence[str],
    error_paths: Sequence[str] = DEFAULT_ERROR_PATHS,
) -> str:
    return _extract(body, content_paths, "message content", error_paths)


def parse_file_response(
    body: str,
    id_paths: Sequence[str] = ("id",),
    error_paths: Sequence[str] = DEFAULT_ERROR_PATHS,
) -> str:
    return _extract(body, id_paths, "file ID", error_paths)


def parse_image_response(
    body: str,
    content_paths: Sequence[str],
    error_paths: Sequence[str] = DEFAULT_ERROR_PATHS,
) -> bytes:
    """Extract base64 image content and decode it."""
    encoded = _extract(body, content_paths, "image content", error_paths)
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedResponseError("Image content is not valid base64", body, raw=exc) from exc


__all__ = ["parse_chat_response", "parse_file_response", "parse_image_response"]
