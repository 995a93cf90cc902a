"""
Normalized chat input: user message, attachments and prior turns.

``ChatInput`` is immutable. Use :meth:`ChatInput.builder` to assemble one from
raw bytes or file paths; the builder classifies every attachment as image or
file and names it by position (``image1.png``, ``file1.pdf``, ...), so the
order of ``attach`` calls is significant.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..mime import extension_for, guess_mime_type, is_image

_MAGIC_BYTES_LENGTH = 1024


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _clean_metadata(metadata: Mapping[str, str]) -> Dict[str, str]:
    return {k.strip(): v.strip() for k, v in metadata.items() if not _is_blank(k) and not _is_blank(v)}


@dataclass(frozen=True)
class Attachment:
    """A file attached to a chat message.

    Exactly one of ``content`` (raw bytes) or ``source`` (a path read lazily)
    is set. Metadata keys and values are stripped and blank entries dropped.
    """

    mime_type: str
    file_name: str
    content: Optional[bytes] = field(default=None, repr=False)
    source: Optional[Path] = None
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if (self.content is None) == (self.source is None):
            raise ValueError("Attachment needs exactly one of content or source")
        if _is_blank(self.mime_type):
            raise ValueError("mime_type may not be blank")
        if _is_blank(self.file_name):
            raise ValueError("file_name may not be blank")
        object.__setattr__(self, "metadata", _clean_metadata(self.metadata))

    @classmethod
    def from_path(cls, source: Union[str, Path], metadata: Optional[Mapping[str, str]] = None) -> "Attachment":
        path = Path(source)
        return cls(
            mime_type=guess_mime_type(_read_head(path)),
            file_name=path.name,
            source=path,
            metadata=metadata or {},
        )

    def read_bytes(self) -> bytes:
        if self.content is not None:
            return self.content
        return self.source.read_bytes()  # type: ignore[union-attr]

    def size(self) -> int:
        if self.content is not None:
            return len(self.content)
        return self.source.stat().st_size  # type: ignore[union-attr]

    def to_base64(self) -> str:
        return base64.b64encode(self.read_bytes()).decode("ascii")

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"

    def with_metadata(self, name: str, value: str) -> "Attachment":
        """Return a copy with one extra metadata entry."""
        if _is_blank(name) or _is_blank(value):
            raise ValueError("Metadata name and value may not be blank")
        return replace(self, metadata={**self.metadata, name.strip(): value.strip()})

    def with_metadata_map(self, metadata: Mapping[str, str]) -> "Attachment":
        """Return a copy with ``metadata`` merged over the current entries."""
        return replace(self, metadata={**self.metadata, **metadata})


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class UploadedFile:
    """Reference to a file previously uploaded to the vendor."""

    id: str
    mime_type: str

    def __post_init__(self) -> None:
        if _is_blank(self.id):
            raise ValueError("id may not be blank")


@dataclass(frozen=True)
class HistoryMessage:
    """One prior conversation turn."""

    role: Role
    content: str
    uploaded_files: Tuple[UploadedFile, ...] = ()

    def __post_init__(self) -> None:
        if _is_blank(self.content):
            raise ValueError("content may not be blank")
        object.__setattr__(self, "role", Role(self.role))
        object.__setattr__(self, "uploaded_files", tuple(self.uploaded_files))


@dataclass(frozen=True)
class ChatInput:
    """User message plus ordered image/file attachments and prior turns."""

    message: str
    images: Tuple[Attachment, ...] = ()
    files: Tuple[Attachment, ...] = ()
    history: Tuple[HistoryMessage, ...] = ()

    def __post_init__(self) -> None:
        if _is_blank(self.message):
            raise ValueError("message may not be blank")
        object.__setattr__(self, "images", tuple(self.images))
        object.__setattr__(self, "files", tuple(self.files))
        object.__setattr__(self, "history", tuple(self.history))

    @classmethod
    def of(cls, message: str) -> "ChatInput":
        return cls(message=message)

    @classmethod
    def builder(cls) -> "ChatInputBuilder":
        return ChatInputBuilder()

    def with_history(self, history: Sequence[HistoryMessage]) -> "ChatInput":
        return replace(self, history=tuple(history))


class ChatInputBuilder:
    """Mutable assembler for :class:`ChatInput`; validation happens in :meth:`build`.

    Parameters:
        mime_detector: Callable returning the MIME type for the leading bytes
            of an attachment. Defaults to :func:`~omnihai_providers.base.mime.guess_mime_type`.
        image_sanitizer: Optional callable normalizing image bytes before they
            are stored (e.g. re-encoding or downscaling).
    """

    def __init__(
        self,
        mime_detector: Callable[[bytes], str] = guess_mime_type,
        image_sanitizer: Optional[Callable[[bytes], bytes]] = None,
    ) -> None:
        self._message: Optional[str] = None
        self._images: List[Attachment] = []
        self._files: List[Attachment] = []
        self._mime_detector = mime_detector
        self._image_sanitizer = image_sanitizer

    def message(self, message: str) -> "ChatInputBuilder":
        self._message = message
        return self

    def attach(self, *items: Union[bytes, str, Path]) -> "ChatInputBuilder":
        """Attach raw bytes or files; paths are read lazily unless they are images."""
        for item in items:
            if isinstance(item, (bytes, bytearray)):
                content = bytes(item)
                self._add(content, None, self._mime_detector(content[:_MAGIC_BYTES_LENGTH]))
            else:
                path = Path(item)
                self._add(None, path, self._mime_detector(_read_head(path)))
        return self

    def _add(self, content: Optional[bytes], source: Optional[Path], mime_type: str) -> None:
        image = is_image(mime_type)
        target = self._images if image else self._files
        prefix = "image" if image else "file"
        file_name = f"{prefix}{len(target) + 1}.{extension_for(mime_type)}"
        if image:
            data = content if content is not None else source.read_bytes()  # type: ignore[union-attr]
            if self._image_sanitizer is not None:
                data = self._image_sanitizer(data)
            target.append(Attachment(mime_type=mime_type, file_name=file_name, content=data))
        else:
            target.append(Attachment(mime_type=mime_type, file_name=file_name, content=content, source=source))

    def build(self) -> ChatInput:
        if _is_blank(self._message):
            raise ValueError("message may not be blank")
        return ChatInput(message=self._message, images=tuple(self._images), files=tuple(self._files))  # type: ignore[arg-type]


def _read_head(path: Path) -> bytes:
    with path.open("rb") as fh:
        return fh.read(_MAGIC_BYTES_LENGTH)


__all__ = [
    "Attachment",
    "Role",
    "UploadedFile",
    "HistoryMessage",
    "ChatInput",
    "ChatInputBuilder",
]
