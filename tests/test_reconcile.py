"""Tests for reconciling the manifest against the lock."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from helpers import OTHER_URL, TEST_URL, FakeGitBackend
from protovend.errors import GitError
from protovend.models.lock import Import, Lock
from protovend.models.manifest import Dependency
from protovend.reconcile import diff_lock, reconcile, update_imports


class TestDiffLock:
    """Tests for diff_lock."""

    def test_matching_import_retained(self) -> None:
        deps = [Dependency(url=TEST_URL, branch="main")]
        imports = [Import(url=TEST_URL, branch="main", commit="old")]

        retained, unresolved = diff_lock(deps, imports)

        assert retained == imports
        assert unresolved == []

    def test_branch_change_needs_resolution(self) -> None:
        deps = [Dependency(url=TEST_URL, branch="branch-2")]
        imports = [Import(url=TEST_URL, branch="main", commit="old")]

        retained, unresolved = diff_lock(deps, imports)

        assert retained == []
        assert unresolved == deps

    def test_removed_dependency_dropped(self) -> None:
        deps = [Dependency(url=TEST_URL, branch="main")]
        imports = [
            Import(url=OTHER_URL, branch="main", commit="gone"),
            Import(url=TEST_URL, branch="main", commit="kept"),
        ]

        retained, unresolved = diff_lock(deps, imports)

        assert retained == [Import(url=TEST_URL, branch="main", commit="kept")]
        assert unresolved == []

    def test_each_import_used_once(self) -> None:
        dep = Dependency(url=TEST_URL, branch="main")
        imports = [Import(url=TEST_URL, branch="main", commit="one")]

        retained, unresolved = diff_lock([dep, dep], imports)

        assert retained == imports
        assert unresolved == [dep]


class TestReconcile:
    """Tests for reconcile."""

    def test_matching_import_not_looked_up(self, backend: FakeGitBackend) -> None:
        backend.publish(TEST_URL, "main", "new", {})
        deps = [Dependency(url=TEST_URL, branch="main")]
        imports = [Import(url=TEST_URL, branch="main", commit="old")]

        result = reconcile(deps, imports, backend)

        assert result == imports
        assert backend.latest_commit_calls == []

    def test_new_dependency_resolved(self, backend: FakeGitBackend) -> None:
        backend.publish(TEST_URL, "branch-2", "tip", {})
        deps = [Dependency(url=TEST_URL, branch="branch-2")]
        imports = [Import(url=TEST_URL, branch="main", commit="old")]

        result = reconcile(deps, imports, backend)

        assert result == [Import(url=TEST_URL, branch="branch-2", commit="tip")]
        assert backend.latest_commit_calls == [(TEST_URL, "branch-2")]

    def test_lookup_failure_propagates(self, backend: FakeGitBackend) -> None:
        with pytest.raises(GitError):
            reconcile([Dependency(url=TEST_URL, branch="main")], [], backend)


class TestUpdateImports:
    """Tests for update_imports."""

    def test_unchanged_lock_not_written(self, backend: FakeGitBackend, tmp_path: Path) -> None:
        lock_path = tmp_path / ".protovend.lock"
        lock = Lock(
            imports=[
                Import(url=TEST_URL, branch="main", commit="1"),
                Import(url=OTHER_URL, branch="main", commit="2"),
            ]
        )
        deps = [Dependency(url=OTHER_URL, branch="main"), Dependency(url=TEST_URL, branch="main")]

        assert update_imports(lock, deps, backend, lock_path) is False
        assert not lock_path.exists()
        assert backend.latest_commit_calls == []

    def test_changed_lock_written_sorted(self, backend: FakeGitBackend, tmp_path: Path) -> None:
        lock_path = tmp_path / ".protovend.lock"
        backend.publish(OTHER_URL, "main", "fresh", {})
        lock = Lock(imports=[Import(url=TEST_URL, branch="main", commit="1")])
        deps = [Dependency(url=TEST_URL, branch="main"), Dependency(url=OTHER_URL, branch="main")]

        assert update_imports(lock, deps, backend, lock_path) is True

        data = yaml.safe_load(lock_path.read_text())
        assert [imp["url"] for imp in data["imports"]] == [str(OTHER_URL), str(TEST_URL)]
        assert data["imports"][1]["commit"] == "1"

    def test_failed_lookup_leaves_lock_untouched(
        self, backend: FakeGitBackend, tmp_path: Path
    ) -> None:
        lock_path = tmp_path / ".protovend.lock"
        lock = Lock(imports=[Import(url=TEST_URL, branch="main", commit="1")])
        lock.write(lock_path)
        before = lock_path.read_text()

        deps = [Dependency(url=TEST_URL, branch="main"), Dependency(url=OTHER_URL, branch="main")]
        with pytest.raises(GitError):
            update_imports(lock, deps, backend, lock_path)

        assert lock_path.read_text() == before
        assert lock.imports == [Import(url=TEST_URL, branch="main", commit="1")]

    def test_removal_rewrites_lock(self, backend: FakeGitBackend, tmp_path: Path) -> None:
        lock_path = tmp_path / ".protovend.lock"
        lock = Lock(imports=[Import(url=TEST_URL, branch="main", commit="1")])

        assert update_imports(lock, [], backend, lock_path) is True
        assert lock.imports == []
        assert "imports: []" in lock_path.read_text()
