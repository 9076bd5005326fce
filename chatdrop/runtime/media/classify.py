"""MIME normalisation, declared-versus-sniffed arbitration, and media kinds."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass

EXTENSION_TO_MIME: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".heic": "image/heic",
    ".avif": "image/avif",
    ".svg": "image/svg+xml",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".csv": "text/csv",
    ".md": "text/markdown",
    ".txt": "text/plain",
    ".json": "application/json",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".m4a": "audio/x-m4a",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
}


@dataclass(frozen=True)
class MimeDecision:
    """Outcome of arbitrating a declared MIME against a sniffed one."""

    effective_mime: str
    is_image: bool
    mismatch: str | None = None


def normalize_mime(mime: str | None) -> str | None:
    """Drop parameters and lower-case: ``"Image/JPEG; q=1"`` -> ``"image/jpeg"``."""
    if not mime:
        return None
    cleaned = mime.split(";", 1)[0].strip().lower()
    return cleaned or None


def is_image_mime(mime: str | None) -> bool:
    return isinstance(mime, str) and mime.startswith("image/")


def resolve_mime(declared: str | None, sniffed: str | None) -> MimeDecision:
    """Decide the effective MIME type and whether the payload is an image.

    A successful sniff always wins, including over a declared image type.
    The declared type only decides when sniffing found nothing.  Both
    arguments are expected to be normalised already.
    """
    effective = sniffed or declared or ""
    if sniffed:
        is_image = is_image_mime(sniffed)
    else:
        is_image = is_image_mime(declared)

    mismatch = None
    if sniffed and declared and sniffed != declared:
        mismatch = f"mime mismatch ({declared} -> {sniffed}), using sniffed"
    return MimeDecision(effective_mime=effective, is_image=is_image, mismatch=mismatch)


def classify(content_type: str | None) -> str:
    """Coarse media kind used in logs and telemetry."""
    ct = normalize_mime(content_type) or ""
    if ct.startswith("image/"):
        return "image"
    if ct.startswith("audio/"):
        return "audio"
    if ct.startswith("video/"):
        return "video"
    return "file"


def guess_mime(file_name: str) -> str | None:
    """Guess a declared MIME type from a file name extension."""
    suffix = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
    return EXTENSION_TO_MIME.get(f".{suffix}") or mimetypes.guess_type(file_name)[0]
