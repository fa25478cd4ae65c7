"""Unit tests for PileSettings (environment parsing only)."""

from __future__ import annotations

from pathlib import Path

import pytest

from pile.settings import PileSettings, _get_settings_cached, get_settings


def test_defaults() -> None:
    settings = PileSettings()
    assert settings.workspace is None
    assert settings.log_level == "WARNING"
    assert settings.metadata_filename == ".pile-tags"


def test_workspace_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PILE_WORKSPACE", str(tmp_path))
    assert PileSettings().workspace == tmp_path


def test_legacy_workspace_variable(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HYLLA_WORKSPACE", str(tmp_path))
    assert PileSettings().workspace == tmp_path


def test_pile_variable_wins(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HYLLA_WORKSPACE", str(tmp_path / "old"))
    monkeypatch.setenv("PILE_WORKSPACE", str(tmp_path / "new"))
    assert PileSettings().workspace == tmp_path / "new"


def test_workspace_expands_user(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("PILE_WORKSPACE", "~/projects")
    assert PileSettings().workspace == tmp_path / "projects"


def test_dotenv_file(tmp_path: Path) -> None:
    # The autouse fixture chdirs into tmp_path.
    (tmp_path / ".env").write_text("PILE_LOG_LEVEL=DEBUG\n", encoding="utf-8")
    assert PileSettings().log_level == "DEBUG"


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("PILE_LOG_LEVEL", "ERROR")
    assert get_settings() is first

    _get_settings_cached.cache_clear()
    assert get_settings().log_level == "ERROR"
