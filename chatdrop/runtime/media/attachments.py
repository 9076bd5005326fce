"""Split chat attachments into inline image blocks and workspace files.

Validation is all-or-nothing: the first malformed, empty or oversized
attachment raises an :class:`~.errors.AttachmentError` and nothing else in
the batch is used.  Persistence is best-effort per file: a file that
cannot be saved (or has no workspace to go to) is logged and dropped
while the rest of the message goes through.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol

from ..config import settings
from ..services.otel import agent_span, record_event, set_span_attribute
from ..util.async_helpers import run_sync
from .classify import classify, normalize_mime, resolve_mime
from .decode import attachment_label, decode_attachment
from .errors import AttachmentContentError, AttachmentFieldError
from .inbound import save_file_to_workspace
from .models import ChatAttachment, DecodedPayload, ImageBlock, ParsedMessage, SavedFile
from .sniff import sniff_base64_head

logger = logging.getLogger(__name__)


class WarningSink(Protocol):
    def warning(self, msg: str, /) -> Any: ...


AttachmentInput = ChatAttachment | Mapping[str, Any] | None

_TEXT_FIELDS = (("file_name", "fileName"), ("mime_type", "mimeType"), ("type", "type"))


def coerce_attachment(raw: AttachmentInput, index: int) -> ChatAttachment | None:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        raw = ChatAttachment.from_dict(raw)
    elif not isinstance(raw, ChatAttachment):
        raise AttachmentContentError(f"attachment-{index + 1}")

    # Labels and MIME hints are only trusted once they are known to be text.
    for attr, wire_name in _TEXT_FIELDS:
        value = getattr(raw, attr)
        if value is not None and not isinstance(value, str):
            raise AttachmentFieldError(f"attachment-{index + 1}", wire_name)
    return raw


def _warn(log: Any, msg: str) -> None:
    logger.warning(msg)
    if log is None:
        return
    emit = getattr(log, "warning", None) or getattr(log, "warn", None)
    if emit is not None:
        emit(msg)


def build_file_references(files: Iterable[SavedFile]) -> str:
    """One ``[Attached file: ...]`` line per saved file, newline-joined."""
    return "\n".join(
        f"[Attached file: {f.file_name} ({f.mime_type}, {f.size_bytes} bytes) → {f.file_path}]"
        for f in files
    )


def append_file_references(message: str, files: list[SavedFile]) -> str:
    if not files:
        return message
    separator = "\n\n" if message.strip() else ""
    return f"{message}{separator}{build_file_references(files)}"


def parse_message_with_attachments(
    message: str,
    attachments: Iterable[AttachmentInput] | None,
    *,
    max_bytes: int | None = None,
    log: WarningSink | None = None,
    workspace_path: str | Path | None = None,
) -> ParsedMessage:
    """Decode, classify and route every attachment of one chat message.

    Images come back as :class:`ImageBlock` entries for the model input.
    Everything else is written below ``<workspace_path>/media/inbound``
    and referenced from the returned message text.  *log* receives a copy
    of every warning; the module logger always gets them.
    """
    attachments = list(attachments or [])
    if not attachments:
        return ParsedMessage(message=message)

    limit = max_bytes if max_bytes is not None else settings.cfg.attachment_max_bytes
    images: list[ImageBlock] = []
    files: list[SavedFile] = []

    with agent_span(
        "attachments.parse",
        attributes={"attachments.count": len(attachments), "attachments.max_bytes": limit},
    ):
        # Validate the whole batch before anything touches the workspace.
        decoded: list[tuple[str, ChatAttachment, DecodedPayload]] = []
        for idx, raw in enumerate(attachments):
            att = coerce_attachment(raw, idx)
            if att is None:
                continue
            label = attachment_label(att, idx)
            decoded.append((label, att, decode_attachment(att.content, label, limit)))

        for label, att, payload in decoded:
            declared = normalize_mime(att.mime_type)
            sniffed = normalize_mime(sniff_base64_head(payload.b64))
            decision = resolve_mime(declared, sniffed)
            logger.debug(
                "[attachments.parse] %s: declared=%s sniffed=%s effective=%s",
                label, declared, sniffed, decision.effective_mime,
            )
            if decision.mismatch:
                _warn(log, f"attachment {label}: {decision.mismatch}")
                record_event("attachment_mime_mismatch", {"declared": declared or "", "sniffed": sniffed or ""})

            if decision.is_image:
                images.append(ImageBlock(data=payload.b64, mime_type=decision.effective_mime))
                continue

            if not workspace_path:
                _warn(
                    log,
                    f"attachment {label}: non-image file ({decision.effective_mime}), "
                    "no workspace configured, dropping",
                )
                record_event("attachment_dropped", {"reason": "no_workspace", "kind": classify(decision.effective_mime)})
                continue

            try:
                saved = save_file_to_workspace(
                    payload.data,
                    file_name=label,
                    mime_type=decision.effective_mime,
                    size_bytes=payload.size_bytes,
                    workspace_path=workspace_path,
                )
            except OSError as exc:
                _warn(log, f"attachment {label}: failed to save file: {exc}")
                record_event("attachment_dropped", {"reason": "write_failed", "kind": classify(decision.effective_mime)})
                continue

            files.append(saved)
            logger.info("[attachments.parse] saved %s (%d bytes) to %s", label, saved.size_bytes, saved.file_path)
            record_event("attachment_saved", {"kind": classify(saved.mime_type), "size_bytes": saved.size_bytes})

        set_span_attribute("attachments.images", len(images))
        set_span_attribute("attachments.files", len(files))

    return ParsedMessage(
        message=append_file_references(message, files),
        images=images,
        files=files,
    )


async def parse_message_with_attachments_async(
    message: str,
    attachments: Iterable[AttachmentInput] | None,
    *,
    max_bytes: int | None = None,
    log: WarningSink | None = None,
    workspace_path: str | Path | None = None,
) -> ParsedMessage:
    """Run :func:`parse_message_with_attachments` off the event loop."""
    return await run_sync(
        parse_message_with_attachments,
        message,
        attachments,
        max_bytes=max_bytes,
        log=log,
        workspace_path=workspace_path,
    )
