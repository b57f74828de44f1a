"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from helpers import FakeGitBackend
from protovend.config import ProtovendSettings
from protovend.project import Protovend


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def settings(project_dir: Path, tmp_path: Path) -> ProtovendSettings:
    return ProtovendSettings(project_dir=project_dir, cache_dir=tmp_path / "cache")


@pytest.fixture
def backend(settings: ProtovendSettings) -> FakeGitBackend:
    return FakeGitBackend(settings.cache_dir)


@pytest.fixture
def protovend(settings: ProtovendSettings, backend: FakeGitBackend) -> Protovend:
    return Protovend(settings, backend)
