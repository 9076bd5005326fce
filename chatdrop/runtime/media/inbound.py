"""Persist non-image attachments into the agent workspace."""

from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path

from .models import SavedFile

logger = logging.getLogger(__name__)

MAX_FILE_NAME_CHARS = 200

# Exclusive-create retries on a prefix collision before giving up.
_MAX_NAME_ATTEMPTS = 5

_UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_file_name(name: str) -> str:
    """Reduce *name* to ``[A-Za-z0-9._-]`` and cap it at 200 characters.

    Path separators become ``_`` so the result is always a single path
    component.
    """
    return _UNSAFE_CHARS_RE.sub("_", name)[:MAX_FILE_NAME_CHARS]


def inbound_dir(workspace_path: str | Path) -> Path:
    return Path(workspace_path) / "media" / "inbound"


def unique_prefix() -> str:
    return uuid.uuid4().hex[:8]


def save_file_to_workspace(
    data: bytes,
    *,
    file_name: str,
    mime_type: str,
    size_bytes: int,
    workspace_path: str | Path,
) -> SavedFile:
    """Write *data* to ``<workspace>/media/inbound/<prefix>-<safe name>``.

    The returned record keeps the caller's original *file_name*; only the
    on-disk name is sanitised.  Raises :class:`OSError` when the directory
    cannot be created or the file cannot be written.
    """
    dest_dir = inbound_dir(workspace_path)
    dest_dir.mkdir(parents=True, exist_ok=True)

    safe_name = sanitize_file_name(file_name)
    for _ in range(_MAX_NAME_ATTEMPTS):
        dest = dest_dir / f"{unique_prefix()}-{safe_name}"
        try:
            fh = open(dest, "xb")
        except FileExistsError:
            logger.debug("[inbound.save] name collision on %s, retrying", dest.name)
            continue
        try:
            with fh:
                fh.write(data)
        except OSError:
            dest.unlink(missing_ok=True)
            raise
        return SavedFile(
            file_path=str(dest.resolve()),
            file_name=file_name,
            mime_type=mime_type,
            size_bytes=size_bytes,
        )
    raise FileExistsError(f"could not allocate a unique name for {safe_name} in {dest_dir}")
