"""Git backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from protovend.models.git_url import GitUrl, to_alpha_num


class GitBackend(ABC):
    """Clones, updates and checks out repositories in a local cache.

    Cache entries live at ``<cache_dir>/<host>/<owner/repo>``, so every
    distinct remote gets its own working copy.
    """

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = cache_dir

    def cache_path(self, url: GitUrl) -> Path:
        """Get the working copy location for ``url``."""
        return self.cache_dir / to_alpha_num(url.host) / url.path

    @abstractmethod
    def latest_commit(self, url: GitUrl, branch: str) -> str:
        """Return the commit at the tip of ``branch`` on the remote."""
        ...

    @abstractmethod
    def checkout(self, url: GitUrl, branch: str, revision: str) -> Path:
        """Bring the cached working copy of ``url`` to ``revision`` and return its path."""
        ...

    @abstractmethod
    def remote_url(self, working_dir: Path) -> GitUrl:
        """Read the ``origin`` url of an existing local repository."""
        ...
