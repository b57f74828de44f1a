"""protovend - vendor protocol buffer definitions from git repositories."""

__version__ = "4.0.0"

from protovend.config import ProtovendSettings
from protovend.errors import ProtovendError
from protovend.models import Dependency, GitUrl, Import, Lock, Manifest
from protovend.project import Protovend

__all__ = [
    "Protovend",
    "ProtovendSettings",
    "ProtovendError",
    "GitUrl",
    "Dependency",
    "Import",
    "Manifest",
    "Lock",
]
