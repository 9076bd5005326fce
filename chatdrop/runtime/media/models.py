"""Attachment input and output records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ChatAttachment:
    """One client-supplied attachment as received from the chat transport."""

    content: Any = None  # base64 text, optionally a data URL
    mime_type: str | None = None
    file_name: str | None = None
    type: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> ChatAttachment:
        """Build from a wire dict using camelCase or snake_case keys."""
        return cls(
            content=raw.get("content"),
            mime_type=raw.get("mimeType", raw.get("mime_type")),
            file_name=raw.get("fileName", raw.get("file_name")),
            type=raw.get("type"),
        )


@dataclass
class DecodedPayload:
    b64: str
    data: bytes
    size_bytes: int


@dataclass
class ImageBlock:
    """Inline image content block for model input."""

    data: str
    mime_type: str
    kind: str = "image"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.kind, "data": self.data, "mimeType": self.mime_type}


@dataclass
class SavedFile:
    """A non-image attachment written to the agent workspace."""

    file_path: str
    file_name: str
    mime_type: str
    size_bytes: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "fileName": self.file_name,
            "mimeType": self.mime_type,
            "sizeBytes": self.size_bytes,
        }


@dataclass
class ParsedMessage:
    message: str
    images: list[ImageBlock] = field(default_factory=list)
    files: list[SavedFile] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "images": [img.to_dict() for img in self.images],
            "files": [f.to_dict() for f in self.files],
        }
