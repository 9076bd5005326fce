"""Base64 decoding and size validation for incoming attachments."""

from __future__ import annotations

import base64
import binascii
import re
from typing import Any

from .errors import AttachmentContentError, AttachmentSizeError, InvalidBase64Error
from .models import ChatAttachment, DecodedPayload

_DATA_URL_RE = re.compile(r"^data:[^;]+;base64,(.*)$", re.DOTALL)
_NON_BASE64_RE = re.compile(r"[^A-Za-z0-9+/=]")


def attachment_label(attachment: ChatAttachment, index: int) -> str:
    """Best available name for error and log messages."""
    return attachment.file_name or attachment.type or f"attachment-{index + 1}"


def strip_data_url(content: str) -> str:
    """Return the base64 payload of a ``data:<mime>;base64,`` URL.

    Text without the prefix is returned unchanged.
    """
    match = _DATA_URL_RE.match(content)
    return match.group(1) if match else content


def is_base64_shaped(b64: str) -> bool:
    return len(b64) % 4 == 0 and not _NON_BASE64_RE.search(b64)


def decode_base64(b64: str, label: str, max_bytes: int) -> DecodedPayload:
    """Decode bare base64 text and enforce ``0 < size <= max_bytes``."""
    if not is_base64_shaped(b64):
        raise InvalidBase64Error(label)
    try:
        data = base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidBase64Error(label) from exc

    size_bytes = len(data)
    if size_bytes <= 0 or size_bytes > max_bytes:
        raise AttachmentSizeError(label, size_bytes, max_bytes)
    return DecodedPayload(b64=b64, data=data, size_bytes=size_bytes)


def decode_attachment(content: Any, label: str, max_bytes: int) -> DecodedPayload:
    """Validate one attachment's content and decode it.

    Raises an :class:`~.errors.AttachmentError` subclass on non-string
    content, malformed base64, or an empty or oversized payload.
    """
    if not isinstance(content, str):
        raise AttachmentContentError(label)
    b64 = strip_data_url(content.strip())
    return decode_base64(b64, label, max_bytes)
