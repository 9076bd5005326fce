"""Media handling -- attachment decoding, classification and persistence."""

from .attachments import (
    append_file_references,
    build_file_references,
    parse_message_with_attachments,
    parse_message_with_attachments_async,
)
from .classify import EXTENSION_TO_MIME, MimeDecision, classify, normalize_mime, resolve_mime
from .errors import (
    AttachmentContentError,
    AttachmentError,
    AttachmentFieldError,
    AttachmentSizeError,
    InvalidBase64Error,
    UnsupportedAttachmentError,
)
from .inbound import inbound_dir, sanitize_file_name, save_file_to_workspace
from .legacy import build_message_with_attachments
from .models import ChatAttachment, ImageBlock, ParsedMessage, SavedFile
from .sniff import sniff_base64_head, sniff_mime

__all__ = [
    "EXTENSION_TO_MIME",
    "AttachmentContentError",
    "AttachmentError",
    "AttachmentFieldError",
    "AttachmentSizeError",
    "ChatAttachment",
    "ImageBlock",
    "InvalidBase64Error",
    "MimeDecision",
    "ParsedMessage",
    "SavedFile",
    "UnsupportedAttachmentError",
    "append_file_references",
    "build_file_references",
    "build_message_with_attachments",
    "classify",
    "inbound_dir",
    "normalize_mime",
    "parse_message_with_attachments",
    "parse_message_with_attachments_async",
    "resolve_mime",
    "sanitize_file_name",
    "save_file_to_workspace",
    "sniff_base64_head",
    "sniff_mime",
]
