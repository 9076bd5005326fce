"""Shared pytest fixtures for chatdrop.runtime tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setenv("CHATDROP_DATA_DIR", str(data_dir))
    monkeypatch.setenv("DOTENV_PATH", str(tmp_path / ".env"))
    for key in (
        "ATTACHMENT_MAX_BYTES",
        "LEGACY_ATTACHMENT_MAX_BYTES",
        "CHATDROP_LOG_LEVEL",
        "APPLICATIONINSIGHTS_CONNECTION_STRING",
        "OTEL_SAMPLING_RATIO",
    ):
        monkeypatch.delenv(key, raising=False)
    return data_dir


@pytest.fixture(autouse=True)
def _reset_singletons(_isolate_data_dir: Path):
    from chatdrop.runtime.util.singletons import reset_all_singletons

    reset_all_singletons()
    yield
    reset_all_singletons()


@pytest.fixture()
def data_dir(_isolate_data_dir: Path) -> Path:
    return _isolate_data_dir


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws
