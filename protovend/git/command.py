"""Git backend that runs the ``git`` binary."""

from __future__ import annotations

import fcntl
import logging
import shutil
import subprocess
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from protovend.errors import GitError, InvalidUrlError
from protovend.git.base import GitBackend
from protovend.models.git_url import GitUrl

logger = logging.getLogger(__name__)


class CommandGitBackend(GitBackend):
    """Runs ``git`` commands against working copies in the cache directory.

    Checkouts are forced: whatever state a cached working copy was left in
    (local edits, untracked files, an interrupted run) is discarded, so
    repeating a checkout always ends at the requested revision.
    """

    def __init__(self, cache_dir: Path, git: str = "git") -> None:
        super().__init__(cache_dir)
        self.git = git

    def latest_commit(self, url: GitUrl, branch: str) -> str:
        logger.info(f"Fetching latest commit hash from {branch} branch of {url}")
        repo_path = self.checkout(url, branch, "HEAD")
        return self._run(["rev-parse", "HEAD"], cwd=repo_path).strip()

    def checkout(self, url: GitUrl, branch: str, revision: str) -> Path:
        repo_path = self.cache_path(url)
        with self._locked(repo_path):
            if (repo_path / ".git").is_dir():
                logger.debug(f"Checking out {url} under branch {branch} for revision {revision}")
                self._reset_to_commit(repo_path, branch, revision)
            else:
                logger.debug(f"Cloning {url} to {repo_path}")
                self._clone(url, repo_path, branch)
                self._run(["reset", "--hard", revision], cwd=repo_path)
        return repo_path

    def remote_url(self, working_dir: Path) -> GitUrl:
        url = self._run(["ls-remote", "--get-url", "origin"], cwd=working_dir)
        try:
            return GitUrl.parse(url)
        except InvalidUrlError as e:
            raise GitError(f"origin of {working_dir} is not a supported git url: {url.strip()}") from e

    def _clone(self, url: GitUrl, repo_path: Path, branch: str) -> None:
        if repo_path.exists():
            # Left behind by an interrupted clone
            shutil.rmtree(repo_path)
        repo_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._run(["clone", "--branch", branch, str(url), str(repo_path)])
        except GitError:
            shutil.rmtree(repo_path, ignore_errors=True)
            raise

    def _reset_to_commit(self, repo_path: Path, branch: str, revision: str) -> None:
        remote_branch = f"origin/{branch}"
        self._run(
            ["fetch", "origin", f"+refs/heads/{branch}:refs/remotes/{remote_branch}"],
            cwd=repo_path,
        )
        self._run(["checkout", "--force", "-B", branch, remote_branch], cwd=repo_path)
        self._run(["clean", "-fd"], cwd=repo_path)
        self._run(["reset", "--hard", remote_branch], cwd=repo_path)
        self._run(["reset", "--hard", revision], cwd=repo_path)

    @contextmanager
    def _locked(self, repo_path: Path) -> Iterator[None]:
        """Hold an exclusive lock on a cache entry."""
        lock_path = repo_path.with_name(repo_path.name + ".lock")
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        with open(lock_path, "a+") as fh:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)

    def _run(self, args: list[str], cwd: Path | None = None) -> str:
        cmd = [self.git, *args]
        try:
            result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"Git {args[0]} failed", cmd=cmd, returncode=e.returncode, stderr=e.stderr or ""
            ) from e
        except OSError as e:
            raise GitError(f"Could not run {self.git}: {e}", cmd=cmd) from e
        return result.stdout
