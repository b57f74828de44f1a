"""Reconciliation of desired dependencies against locked imports."""

from __future__ import annotations

import logging
from pathlib import Path

from protovend.git.base import GitBackend
from protovend.models.lock import Import, Lock
from protovend.models.manifest import Dependency

logger = logging.getLogger(__name__)


def diff_lock(
    dependencies: list[Dependency], imports: list[Import]
) -> tuple[list[Import], list[Dependency]]:
    """Split ``dependencies`` into imports that can be kept and ones needing resolution.

    An import is kept when its url and branch match a dependency; its commit
    is left untouched. Imports no dependency asks for are dropped.

    Returns:
        (retained imports, dependencies without a matching import)
    """
    pool = list(imports)
    retained: list[Import] = []
    unresolved: list[Dependency] = []

    for dep in dependencies:
        position = next((i for i, imp in enumerate(pool) if imp.matches(dep)), None)
        if position is None:
            unresolved.append(dep)
        else:
            retained.append(pool.pop(position))

    for dropped in pool:
        logger.debug(f"Dropping {dropped.url} ({dropped.branch}) from lock")

    return retained, unresolved


def resolve(dependency: Dependency, backend: GitBackend) -> Import:
    """Pin ``dependency`` to the current tip of its branch."""
    commit = backend.latest_commit(dependency.url, dependency.branch)
    return Import(url=dependency.url, branch=dependency.branch, commit=commit)


def reconcile(
    dependencies: list[Dependency], imports: list[Import], backend: GitBackend
) -> list[Import]:
    """Compute the import list for ``dependencies``, looking up only what changed."""
    retained, unresolved = diff_lock(dependencies, imports)
    resolved = [resolve(dep, backend) for dep in unresolved]
    return retained + resolved


def _content(imports: list[Import]) -> list[tuple[str, str, str]]:
    return sorted((imp.url, imp.branch, imp.commit) for imp in imports)


def update_imports(
    lock: Lock, dependencies: list[Dependency], backend: GitBackend, lock_path: Path
) -> bool:
    """Reconcile ``lock`` with ``dependencies`` and rewrite it if anything changed.

    Every lookup happens before the lock is touched, so a failed lookup
    leaves the lock file as it was.

    Returns:
        True when the lock file was rewritten.
    """
    new_imports = reconcile(dependencies, lock.imports, backend)
    if _content(new_imports) == _content(lock.imports):
        logger.debug(f"{lock_path.name} is up to date")
        return False

    lock.imports = new_imports
    lock.write(lock_path)
    logger.info(f"Updated {lock_path.name}")
    return True
