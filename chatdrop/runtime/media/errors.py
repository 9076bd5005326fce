"""Batch-fatal attachment errors.

Every error carries the attachment label so a caller handling a
multi-attachment request can tell the user which one was rejected.
"""

from __future__ import annotations


class AttachmentError(ValueError):
    """Base class for errors that reject the whole attachment batch."""

    def __init__(self, label: str, reason: str) -> None:
        super().__init__(f"attachment {label}: {reason}")
        self.label = label
        self.reason = reason


class AttachmentContentError(AttachmentError):
    """The attachment content is not a base64 string."""

    def __init__(self, label: str) -> None:
        super().__init__(label, "content must be base64 string")


class InvalidBase64Error(AttachmentError):
    """The content is not well-formed base64."""

    def __init__(self, label: str) -> None:
        super().__init__(label, "invalid base64 content")


class AttachmentSizeError(AttachmentError):
    """The decoded payload is empty or larger than the configured ceiling."""

    def __init__(self, label: str, size_bytes: int, max_bytes: int) -> None:
        super().__init__(label, f"exceeds size limit ({size_bytes} > {max_bytes} bytes)")
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes


class UnsupportedAttachmentError(AttachmentError):
    """The attachment type is not accepted by the legacy markdown format."""

    def __init__(self, label: str) -> None:
        super().__init__(label, "only image/* supported")


class AttachmentFieldError(AttachmentError):
    """A descriptor field such as ``fileName`` is present but not a string."""

    def __init__(self, label: str, field: str) -> None:
        super().__init__(label, f"{field} must be a string")
        self.field = field
