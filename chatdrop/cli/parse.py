"""Attachment ingestion CLI.

Runs local files through the same pipeline a chat request uses and shows
what the agent would receive: inline images, saved files and the
augmented message text.

Usage::

    chatdrop-parse report.pdf photo.jpg -m "see attached" --agent demo
    chatdrop-parse notes.csv --workspace ./ws --json
    chatdrop-parse blob.bin --mime application/octet-stream --max-bytes 1000000
"""

from __future__ import annotations

import argparse
import asyncio
import base64
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from chatdrop.runtime.config import settings
from chatdrop.runtime.media import (
    AttachmentError,
    ChatAttachment,
    ParsedMessage,
    parse_message_with_attachments_async,
)
from chatdrop.runtime.media.classify import guess_mime
from chatdrop.runtime.services.otel import configure_otel, shutdown_otel

logger = logging.getLogger(__name__)
console = Console()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatdrop-parse",
        description="Classify and store chat attachments the way a chat turn would.",
    )
    parser.add_argument("files", nargs="*", help="Files to attach.")
    parser.add_argument(
        "-m", "--message",
        default="",
        help="Message text the attachments belong to.",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "-w", "--workspace",
        default=None,
        help="Workspace directory that receives non-image files.",
    )
    target.add_argument(
        "-a", "--agent",
        default=None,
        help="Agent id; its workspace is resolved under CHATDROP_DATA_DIR.",
    )
    parser.add_argument(
        "--max-bytes",
        type=int,
        default=None,
        help="Per-attachment size ceiling (default: ATTACHMENT_MAX_BYTES).",
    )
    parser.add_argument(
        "--mime",
        default=None,
        help="Declared MIME type for every file (default: guessed from the extension).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the result as JSON instead of a table.",
    )
    return parser


def _load_attachments(paths: list[str], mime_override: str | None) -> list[ChatAttachment]:
    attachments: list[ChatAttachment] = []
    for raw in paths:
        path = Path(raw)
        if not path.is_file():
            console.print(f"[red]Error:[/red] file not found: {path}")
            sys.exit(1)
        attachments.append(
            ChatAttachment(
                content=base64.b64encode(path.read_bytes()).decode("ascii"),
                mime_type=mime_override or guess_mime(path.name),
                file_name=path.name,
            )
        )
    return attachments


def _resolve_workspace(args: argparse.Namespace) -> Path | None:
    if args.workspace:
        return Path(args.workspace).expanduser().resolve()
    if args.agent:
        settings.cfg.ensure_dirs()
        return settings.cfg.workspace_dir(args.agent)
    return None


def _render(result: ParsedMessage) -> None:
    table = Table(title="Attachments")
    table.add_column("Kind")
    table.add_column("Name / path")
    table.add_column("MIME")
    table.add_column("Bytes", justify="right")
    for img in result.images:
        table.add_row("image", "(inline)", img.mime_type, str(len(base64.b64decode(img.data))))
    for f in result.files:
        table.add_row("file", f.file_path, f.mime_type, str(f.size_bytes))
    console.print(table)
    console.print("[bold]Message:[/bold]")
    console.print(result.message or "(empty)", markup=False, highlight=False)


def _summary(result: ParsedMessage) -> dict:
    data = result.to_dict()
    for img in data["images"]:
        img["data"] = f"<{len(img['data'])} base64 chars>"
    return data


async def _run(args: argparse.Namespace) -> int:
    attachments = _load_attachments(args.files, args.mime)
    workspace = _resolve_workspace(args)

    cfg = settings.cfg
    configure_otel(cfg.otel_connection_string, sampling_ratio=cfg.otel_sampling_ratio)
    try:
        result = await parse_message_with_attachments_async(
            args.message,
            attachments,
            max_bytes=args.max_bytes,
            workspace_path=workspace,
        )
    except AttachmentError as exc:
        console.print(f"[red]Rejected:[/red] {exc}", highlight=False)
        return 1
    finally:
        shutdown_otel()

    if args.json:
        sys.stdout.write(json.dumps(_summary(result), indent=2, ensure_ascii=False) + "\n")
    else:
        _render(result)
    return 0


def main() -> None:
    """CLI entry point for ``chatdrop-parse``."""
    parser = _build_parser()
    args = parser.parse_args()

    if not args.files:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=settings.cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        code = asyncio.run(_run(args))
    except KeyboardInterrupt:
        code = 130

    sys.exit(code)


if __name__ == "__main__":
    main()
