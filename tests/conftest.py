"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest

from tests.support.fakes import FakeGit, FakeProbe

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def fake_git() -> FakeGit:
    """Provide a git double with no remotes."""
    return FakeGit()


@pytest.fixture
def fake_probe() -> FakeProbe:
    """Provide a probe double that finds nothing."""
    return FakeProbe()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Provide an empty checkout cache."""
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer tokens and settings out of the tests."""
    for var in (
        "GH_TOKEN",
        "GITHUB_TOKEN",
        "FONTSOURCES_WORKERS",
        "FONTSOURCES_HTTP_TIMEOUT",
        "FONTSOURCES_GIT_TIMEOUT",
        "FONTSOURCES_MAX_RATE_LIMIT_RETRIES",
        "FONTSOURCES_POLL_INTERVAL",
        "FONTSOURCES_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
