"""Main Protovend class - entry point for every command."""

from __future__ import annotations

import logging
import shutil

from protovend.check import run_checks
from protovend.config import ProtovendSettings
from protovend.git.base import GitBackend
from protovend.git.command import CommandGitBackend
from protovend.models.git_url import GitUrl
from protovend.models.lock import Lock
from protovend.models.manifest import Manifest
from protovend.reconcile import update_imports
from protovend.vendor import vendor

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"


class Protovend:
    """Manages the protovend metadata and vendored protos of one project."""

    def __init__(
        self,
        settings: ProtovendSettings | None = None,
        backend: GitBackend | None = None,
    ) -> None:
        self.settings = settings or ProtovendSettings()
        self.backend = backend or CommandGitBackend(self.settings.cache_dir)

    def init(self) -> None:
        """Create an empty manifest and lock; existing files are left alone."""
        manifest_path = self.settings.manifest_path
        if manifest_path.exists():
            logger.warning(f"{manifest_path.name} file already exists in project")
        else:
            Manifest().write(manifest_path)
            logger.info(f"Created {manifest_path.name}")

        lock_path = self.settings.lock_path
        if lock_path.exists():
            logger.warning(f"{lock_path.name} file already exists in project")
        else:
            Lock().write(lock_path)
            logger.info(f"Created {lock_path.name}")

    def add(self, url: GitUrl, branch: str = DEFAULT_BRANCH) -> bool:
        """Add a dependency to the manifest.

        Returns:
            True when the manifest changed
        """
        manifest = Manifest.load(self.settings.manifest_path)
        return manifest.add_dependency(url, branch, self.settings.manifest_path)

    def install(self) -> int:
        """Resolve new dependencies and vendor every locked import.

        Returns:
            Number of proto files vendored
        """
        manifest = Manifest.load(self.settings.manifest_path)
        lock = Lock.load(self.settings.lock_path)
        return self._sync(manifest, lock)

    def update(self, url: GitUrl | None = None) -> int:
        """Re-resolve ``url`` (or every dependency) to the latest commit and vendor.

        Returns:
            Number of proto files vendored
        """
        manifest = Manifest.load(self.settings.manifest_path)
        lock = Lock.load(self.settings.lock_path)
        if url is None:
            lock.clear_all_imports()
        else:
            lock.clear_imports(url)
        return self._sync(manifest, lock)

    def cleanup(self) -> None:
        """Delete every cached repository."""
        cache_dir = self.settings.cache_dir
        if cache_dir.exists():
            shutil.rmtree(cache_dir)
            logger.info(f"Removed {cache_dir}")
        else:
            logger.info(f"Nothing to clean up at {cache_dir}")

    def lint(self) -> None:
        """Check the project's own proto layout against its origin url."""
        project_dir = self.settings.project_dir
        url = self.backend.remote_url(project_dir)
        run_checks(project_dir, url, self.settings.proto_dir)
        logger.info(f"{project_dir} passed protovend checks")

    def _sync(self, manifest: Manifest, lock: Lock) -> int:
        update_imports(lock, manifest.vendor, self.backend, self.settings.lock_path)
        count = vendor(lock.imports, self.backend, self.settings)
        self._log_next_steps()
        return count

    def _log_next_steps(self) -> None:
        settings = self.settings
        logger.info(
            "Next Steps:\n"
            "Check the following protovend generated files and vendored proto directory "
            "(containing .proto files) into source control\n"
            f"  - {settings.manifest_name}\n"
            f"  - {settings.lock_name}\n"
            f"  - {settings.output_dir}"
        )
