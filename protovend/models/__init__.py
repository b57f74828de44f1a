"""Data models for protovend."""

from protovend.models.git_url import GitUrl
from protovend.models.lock import Import, Lock
from protovend.models.manifest import Dependency, Manifest

__all__ = [
    "GitUrl",
    "Dependency",
    "Manifest",
    "Import",
    "Lock",
]
