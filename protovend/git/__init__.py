"""Git backends for fetching dependency repositories."""

from protovend.git.base import GitBackend
from protovend.git.command import CommandGitBackend

__all__ = ["GitBackend", "CommandGitBackend"]
