"""Application settings -- reads from environment and ``.env`` file."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import ClassVar

from ..util.env_file import EnvFile
from ..util.singletons import register_singleton

logger = logging.getLogger(__name__)

DEFAULT_ATTACHMENT_MAX_BYTES = 5_000_000
DEFAULT_LEGACY_ATTACHMENT_MAX_BYTES = 2_000_000

_AGENT_ID_RE = re.compile(r"[^a-zA-Z0-9._-]")


class Settings:

    _DATA_DIR_ENV: ClassVar[str] = "CHATDROP_DATA_DIR"

    def __init__(self) -> None:
        dotenv = os.getenv("DOTENV_PATH")
        if not dotenv:
            data_dir = os.getenv(self._DATA_DIR_ENV)
            if data_dir:
                dotenv = str(Path(data_dir) / ".env")
            else:
                dotenv = ".env"
        self.env = EnvFile(dotenv)
        self.reload()

    def reload(self) -> None:
        e = self._read

        self.attachment_max_bytes: int = self._read_int(
            "ATTACHMENT_MAX_BYTES", DEFAULT_ATTACHMENT_MAX_BYTES,
        )
        self.legacy_attachment_max_bytes: int = self._read_int(
            "LEGACY_ATTACHMENT_MAX_BYTES", DEFAULT_LEGACY_ATTACHMENT_MAX_BYTES,
        )
        self.log_level: str = self._read_log_level()
        self.otel_connection_string: str = e("APPLICATIONINSIGHTS_CONNECTION_STRING")
        self.otel_sampling_ratio: float = self._read_float("OTEL_SAMPLING_RATIO", 1.0)

    @property
    def data_dir(self) -> Path:
        raw = self._read(self._DATA_DIR_ENV)
        return Path(raw) if raw else Path.home() / ".chatdrop"

    @property
    def workspaces_dir(self) -> Path:
        return self.data_dir / "workspaces"

    def workspace_dir(self, agent_id: str) -> Path:
        """Return the workspace directory for *agent_id*.

        The identifier is reduced to a filesystem-safe name so a crafted
        agent id cannot escape :attr:`workspaces_dir`.
        """
        safe = _AGENT_ID_RE.sub("_", agent_id.strip()).strip(".") or "default"
        return self.workspaces_dir / safe

    def ensure_dirs(self) -> None:
        for d in (self.data_dir, self.workspaces_dir):
            d.mkdir(parents=True, exist_ok=True)

    def _read(self, key: str) -> str:
        return self.env.read(key) or os.getenv(key, "")

    def _read_int(self, key: str, default: int) -> int:
        raw = self._read(key)
        if not raw:
            return default
        try:
            value = int(raw.replace("_", ""))
        except ValueError:
            logger.warning("[settings] %s=%r is not an integer, using %d", key, raw, default)
            return default
        if value <= 0:
            logger.warning("[settings] %s must be positive, using %d", key, default)
            return default
        return value

    def _read_log_level(self) -> str:
        raw = (self._read("CHATDROP_LOG_LEVEL") or "INFO").upper()
        if not isinstance(logging.getLevelName(raw), int):
            logger.warning("[settings] unknown CHATDROP_LOG_LEVEL %r, using INFO", raw)
            return "INFO"
        return raw

    def _read_float(self, key: str, default: float) -> float:
        raw = self._read(key)
        if not raw:
            return default
        try:
            return float(raw)
        except ValueError:
            logger.warning("[settings] %s=%r is not a number, using %s", key, raw, default)
            return default


cfg = Settings()


def _reset_cfg() -> None:
    global cfg
    cfg = Settings()


register_singleton(_reset_cfg)
