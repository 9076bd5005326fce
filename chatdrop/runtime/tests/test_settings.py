"""Tests for the Settings module."""

from __future__ import annotations

from pathlib import Path

import pytest

from chatdrop.runtime.config.settings import Settings


class TestSettings:
    def test_defaults(self, data_dir: Path) -> None:
        s = Settings()
        assert s.attachment_max_bytes == 5_000_000
        assert s.legacy_attachment_max_bytes == 2_000_000
        assert s.log_level == "INFO"
        assert s.otel_connection_string == ""

    def test_data_dir_from_env(self, data_dir: Path) -> None:
        assert Settings().data_dir == data_dir

    def test_env_file_overrides_process_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".env").write_text('ATTACHMENT_MAX_BYTES="1_000"\n# comment\nexport CHATDROP_LOG_LEVEL=debug\n')
        monkeypatch.setenv("ATTACHMENT_MAX_BYTES", "42")
        s = Settings()
        assert s.attachment_max_bytes == 1000
        assert s.log_level == "DEBUG"

    def test_invalid_int_falls_back(self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
        monkeypatch.setenv("ATTACHMENT_MAX_BYTES", "lots")
        assert Settings().attachment_max_bytes == 5_000_000
        assert "ATTACHMENT_MAX_BYTES" in caplog.text

    def test_non_positive_int_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ATTACHMENT_MAX_BYTES", "0")
        assert Settings().attachment_max_bytes == 5_000_000

    def test_unknown_log_level_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHATDROP_LOG_LEVEL", "chatty")
        assert Settings().log_level == "INFO"

    def test_workspace_dir(self, data_dir: Path) -> None:
        s = Settings()
        assert s.workspace_dir("agent-1") == data_dir / "workspaces" / "agent-1"

    def test_workspace_dir_cannot_escape(self, data_dir: Path) -> None:
        s = Settings()
        ws = s.workspace_dir("../../etc")
        assert ws.parent == s.workspaces_dir
        assert s.workspace_dir("..") == s.workspaces_dir / "default"

    def test_ensure_dirs(self, data_dir: Path) -> None:
        s = Settings()
        s.ensure_dirs()
        assert s.workspaces_dir.is_dir()
