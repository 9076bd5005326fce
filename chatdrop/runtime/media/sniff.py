"""Magic-byte MIME detection.

Only binary container formats are recognised.  Plain text (CSV, JSON,
source code, Markdown) has no reliable signature and is reported as no
match, which leaves the caller's declared type in charge.
"""

from __future__ import annotations

import base64
import binascii
import logging

logger = logging.getLogger(__name__)

# Base64 characters decoded for sniffing; 256 chars -> 192 bytes.
SNIFF_HEAD_CHARS = 256

# (offset, signature, mime)
_SIGNATURES: tuple[tuple[int, bytes, str], ...] = (
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"II*\x00", "image/tiff"),
    (0, b"MM\x00*", "image/tiff"),
    (0, b"\x00\x00\x01\x00", "image/x-icon"),
    (0, b"8BPS", "image/vnd.adobe.photoshop"),
    (0, b"\xff\x0a", "image/jxl"),
    (0, b"\x00\x00\x00\x0cJXL \r\n\x87\n", "image/jxl"),
    (0, b"%PDF-", "application/pdf"),
    (0, b"%!PS", "application/postscript"),
    (0, b"{\\rtf", "application/rtf"),
    (0, b"PK\x03\x04", "application/zip"),
    (0, b"PK\x05\x06", "application/zip"),
    (0, b"\x1f\x8b", "application/gzip"),
    (0, b"BZh", "application/x-bzip2"),
    (0, b"\xfd7zXZ\x00", "application/x-xz"),
    (0, b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
    (0, b"Rar!\x1a\x07", "application/x-rar-compressed"),
    (0, b"SQLite format 3\x00", "application/x-sqlite3"),
    (0, b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", "application/x-cfb"),
    (0, b"\x7fELF", "application/x-elf"),
    (0, b"\x00asm", "application/wasm"),
    (0, b"wOFF", "font/woff"),
    (0, b"wOF2", "font/woff2"),
    (0, b"\x00\x01\x00\x00\x00", "font/ttf"),
    (0, b"OTTO", "font/otf"),
    (0, b"ID3", "audio/mpeg"),
    (0, b"OggS", "audio/ogg"),
    (0, b"fLaC", "audio/x-flac"),
    (0, b"#!AMR", "audio/amr"),
    (0, b"MThd", "audio/midi"),
    (0, b"FLV\x01", "video/x-flv"),
)

_MP3_FRAME_SYNC = (b"\xff\xfb", b"\xff\xf3", b"\xff\xf2")

_FTYP_BRANDS: dict[bytes, str] = {
    b"avif": "image/avif",
    b"avis": "image/avif",
    b"heic": "image/heic",
    b"heix": "image/heic",
    b"hevc": "image/heic-sequence",
    b"hevx": "image/heic-sequence",
    b"mif1": "image/heif",
    b"msf1": "image/heif-sequence",
    b"qt  ": "video/quicktime",
    b"M4A ": "audio/x-m4a",
    b"M4B ": "audio/x-m4a",
    b"3gp4": "video/3gpp",
    b"3gp5": "video/3gpp",
}


def _sniff_riff(buf: bytes) -> str | None:
    if buf[:4] != b"RIFF" or len(buf) < 12:
        return None
    form = buf[8:12]
    if form == b"WEBP":
        return "image/webp"
    if form == b"WAVE":
        return "audio/wav"
    if form == b"AVI ":
        return "video/vnd.avi"
    return None


def _sniff_ftyp(buf: bytes) -> str | None:
    if len(buf) < 12 or buf[4:8] != b"ftyp":
        return None
    return _FTYP_BRANDS.get(buf[8:12], "video/mp4")


def _sniff_bmp(buf: bytes) -> str | None:
    # "BM" alone is common at the start of text; the reserved header words must be zero.
    if buf[:2] == b"BM" and len(buf) >= 14 and buf[6:10] == b"\x00\x00\x00\x00":
        return "image/bmp"
    return None


def _sniff_ebml(buf: bytes) -> str | None:
    if buf[:4] != b"\x1a\x45\xdf\xa3":
        return None
    return "video/webm" if b"webm" in buf[:64] else "video/x-matroska"


_STRUCTURED_SNIFFERS = (_sniff_riff, _sniff_ftyp, _sniff_bmp, _sniff_ebml)


def sniff_mime(buffer: bytes) -> str | None:
    """Return the MIME type whose magic bytes start *buffer*, or ``None``."""
    if not buffer:
        return None
    for sniffer in _STRUCTURED_SNIFFERS:
        mime = sniffer(buffer)
        if mime:
            return mime
    for offset, signature, mime in _SIGNATURES:
        if buffer[offset:offset + len(signature)] == signature:
            return mime
    if buffer[:2] in _MP3_FRAME_SYNC:
        return "audio/mpeg"
    return None


def sniff_base64_head(b64: str) -> str | None:
    """Sniff the MIME type from the leading bytes of base64 text.

    At most :data:`SNIFF_HEAD_CHARS` characters are decoded, rounded down
    to a whole base64 quantum.  Heads shorter than 8 characters are too
    small to sniff.  Errors are treated as an inconclusive result.
    """
    trimmed = b64.strip()
    if not trimmed:
        return None

    take = min(SNIFF_HEAD_CHARS, len(trimmed))
    slice_len = take - (take % 4)
    if slice_len < 8:
        return None

    try:
        head = base64.b64decode(trimmed[:slice_len])
        return sniff_mime(head)
    except (binascii.Error, ValueError):
        logger.debug("[sniff] undecodable base64 head, treating as inconclusive", exc_info=True)
        return None
