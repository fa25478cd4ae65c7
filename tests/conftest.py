"""Shared test fixtures.

Every test gets an empty workspace under ``tmp_path`` and a clean
environment: no ``PILE_*`` / ``HYLLA_*`` variables and no cached settings.
No network or external services required.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from pile.managers.projects import ProjectStore
from pile.settings import _get_settings_cached


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Isolate tests from the developer's environment and ``.env`` file."""
    for key in ("PILE_WORKSPACE", "HYLLA_WORKSPACE", "PILE_LOG_LEVEL", "PILE_METADATA_FILENAME"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    _get_settings_cached.cache_clear()
    yield
    _get_settings_cached.cache_clear()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def store(workspace: Path) -> ProjectStore:
    return ProjectStore(workspace)
