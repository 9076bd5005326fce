"""Deprecated markdown embedding of image attachments.

Older clients received images inlined into the message text as
markdown data URLs.  Models cannot read images from markdown, so new
code should use :func:`~.attachments.parse_message_with_attachments`.
"""

from __future__ import annotations

import re
import warnings
from collections.abc import Iterable

from ..config import settings
from .attachments import AttachmentInput, coerce_attachment
from .decode import attachment_label, decode_base64
from .errors import AttachmentContentError, UnsupportedAttachmentError

_WHITESPACE_RE = re.compile(r"\s+")


def build_message_with_attachments(
    message: str,
    attachments: Iterable[AttachmentInput] | None,
    *,
    max_bytes: int | None = None,
) -> str:
    """Append ``![label](data:<mime>;base64,...)`` blocks to *message*.

    Only attachments declared as ``image/*`` are accepted and the content
    must be bare base64 (no data-URL prefix).
    """
    warnings.warn(
        "build_message_with_attachments is deprecated; use parse_message_with_attachments",
        DeprecationWarning,
        stacklevel=2,
    )
    attachments = list(attachments or [])
    if not attachments:
        return message

    limit = max_bytes if max_bytes is not None else settings.cfg.legacy_attachment_max_bytes
    blocks: list[str] = []

    for idx, raw in enumerate(attachments):
        att = coerce_attachment(raw, idx)
        if att is None:
            continue
        mime = att.mime_type or ""
        label = attachment_label(att, idx)

        if not isinstance(att.content, str):
            raise AttachmentContentError(label)
        if not mime.startswith("image/"):
            raise UnsupportedAttachmentError(label)

        decode_base64(att.content.strip(), label, limit)

        safe_label = _WHITESPACE_RE.sub("_", label)
        blocks.append(f"![{safe_label}](data:{mime};base64,{att.content})")

    if not blocks:
        return message
    separator = "\n\n" if message.strip() else ""
    return message + separator + "\n\n".join(blocks)
