"""Test doubles and file helpers shared by the test modules."""

from __future__ import annotations

import shutil
from pathlib import Path

from protovend.errors import GitError
from protovend.git.base import GitBackend
from protovend.models.git_url import GitUrl

TEST_URL = GitUrl("https://github.com/Skyscanner/protovend-test-protos.git")
OTHER_URL = GitUrl("git@github.com:acme/Billing_API.git")


class FakeGitBackend(GitBackend):
    """In-memory git backend.

    ``branches`` maps ``(url, branch)`` to the tip commit and ``trees`` maps
    ``(url, commit)`` to the files of that commit.
    """

    def __init__(self, cache_dir: Path) -> None:
        super().__init__(cache_dir)
        self.branches: dict[tuple[str, str], str] = {}
        self.trees: dict[tuple[str, str], dict[str, str]] = {}
        self.origin: GitUrl | None = None
        self.latest_commit_calls: list[tuple[str, str]] = []
        self.checkout_calls: list[tuple[str, str, str]] = []

    def publish(self, url: GitUrl, branch: str, commit: str, files: dict[str, str]) -> None:
        """Make ``commit`` the tip of ``branch`` with the given files."""
        self.branches[(url, branch)] = commit
        self.trees[(url, commit)] = files

    def latest_commit(self, url: GitUrl, branch: str) -> str:
        self.latest_commit_calls.append((url, branch))
        try:
            return self.branches[(url, branch)]
        except KeyError:
            raise GitError(f"Git clone failed for {url}", returncode=128) from None

    def checkout(self, url: GitUrl, branch: str, revision: str) -> Path:
        self.checkout_calls.append((url, branch, revision))
        if (url, branch) not in self.branches or (url, revision) not in self.trees:
            raise GitError(f"Git reset failed for {url}", returncode=128)

        repo_path = self.cache_path(url)
        if repo_path.exists():
            shutil.rmtree(repo_path)
        repo_path.mkdir(parents=True)
        for rel_path, content in self.trees[(url, revision)].items():
            target = repo_path / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return repo_path

    def remote_url(self, working_dir: Path) -> GitUrl:
        if self.origin is None:
            raise GitError("Git ls-remote failed", returncode=128)
        return self.origin


def valid_tree(url: GitUrl, *names: str) -> dict[str, str]:
    """Files for a repository laid out under proto/<sanitised path>/."""
    names = names or ("heartbeat-v1.proto",)
    return {f"proto/{url.sanitised_path}/{name}": f"// {name}\n" for name in names}


def write_file(path: Path, contents: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents)
    return path
