"""Minimal MIME sniffing for chat attachments.

Only the formats adapters treat specially are recognised: the image types
vendors accept inline and PDF. Everything else is
``application/octet-stream`` and travels as a generic file attachment.
"""
from __future__ import annotations

from typing import Dict

OCTET_STREAM = "application/octet-stream"

IMAGE_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/gif", "image/webp"})

_EXTENSIONS: Dict[str, str] = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
    "application/pdf": "pdf",
    "text/plain": "txt",
    "application/json": "json",
    OCTET_STREAM: "bin",
}


def guess_mime_type(head: bytes) -> str:
    """Return the MIME type for the leading bytes of a file."""
    if head.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if head.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if head.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    if len(head) >= 12 and head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"
    if head.startswith(b"%PDF-"):
        return "application/pdf"
    return OCTET_STREAM


def extension_for(mime_type: str) -> str:
    return _EXTENSIONS.get(mime_type, "bin")


def is_image(mime_type: str) -> bool:
    return mime_type in IMAGE_MIME_TYPES


__all__ = ["OCTET_STREAM", "IMAGE_MIME_TYPES", "guess_mime_type", "extension_for", "is_image"]
