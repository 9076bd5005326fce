"""Tests for magic-byte MIME sniffing."""

from __future__ import annotations

import base64

import pytest

from chatdrop.runtime.media.sniff import sniff_base64_head, sniff_mime


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class TestSniffMime:
    @pytest.mark.parametrize(
        ("head", "expected"),
        [
            (b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR", "image/png"),
            (b"\xff\xd8\xff\xe0\x00\x10JFIF\x00", "image/jpeg"),
            (b"GIF89a\x01\x00\x01\x00", "image/gif"),
            (b"RIFF\x24\x00\x00\x00WEBPVP8 ", "image/webp"),
            (b"RIFF\x24\x00\x00\x00WAVEfmt ", "audio/wav"),
            (b"%PDF-1.4\n", "application/pdf"),
            (b"PK\x03\x04\x14\x00\x06\x00", "application/zip"),
            (b"\x1f\x8b\x08\x00", "application/gzip"),
            (b"ID3\x04\x00", "audio/mpeg"),
            (b"\x00\x00\x00\x20ftypheic\x00\x00", "image/heic"),
            (b"\x00\x00\x00\x20ftypisom\x00\x00", "video/mp4"),
        ],
    )
    def test_known_signatures(self, head: bytes, expected: str) -> None:
        assert sniff_mime(head) == expected

    def test_bmp_requires_reserved_zero_bytes(self) -> None:
        bmp = b"BM" + b"\x36\x00\x0c\x00" + b"\x00\x00\x00\x00" + b"\x36\x00\x00\x00"
        assert sniff_mime(bmp) == "image/bmp"
        assert sniff_mime(b"BMW service invoice 2024") is None

    def test_plain_text_is_no_match(self) -> None:
        assert sniff_mime(b"name,amount\nalice,3\n") is None

    def test_empty_buffer(self) -> None:
        assert sniff_mime(b"") is None


class TestSniffBase64Head:
    def test_sniffs_png(self) -> None:
        data = b"\x89PNG\r\n\x1a\n" + b"\x00" * 500
        assert sniff_base64_head(_b64(data)) == "image/png"

    def test_only_head_is_decoded(self) -> None:
        b64 = _b64(b"%PDF-1.7\n" + b"\x00" * 300) + "!!!!"
        assert sniff_base64_head(b64) == "application/pdf"

    def test_short_input_is_inconclusive(self) -> None:
        assert sniff_base64_head("/9j/") is None

    def test_empty_input(self) -> None:
        assert sniff_base64_head("   ") is None

    def test_undecodable_head_is_swallowed(self) -> None:
        assert sniff_base64_head("ab=cdefghijk") is None

    def test_deterministic(self) -> None:
        b64 = _b64(b"GIF87a" + b"\x00" * 20)
        assert sniff_base64_head(b64) == sniff_base64_head(b64) == "image/gif"

    def test_tar_header_lies_beyond_the_head(self) -> None:
        header = b"notes.txt".ljust(257, b"\x00") + b"ustar\x0000" + b"\x00" * 246
        assert sniff_base64_head(_b64(header)) is None
