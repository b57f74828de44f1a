"""Copies proto files of locked imports into the project's output directory."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from protovend.check import run_checks
from protovend.config import ProtovendSettings
from protovend.errors import VendorError
from protovend.git.base import GitBackend
from protovend.models.lock import Import

logger = logging.getLogger(__name__)

PROTO_SUFFIX = ".proto"


def prepare_output_directory(output_path: Path) -> None:
    """Replace ``output_path`` with an empty directory."""
    if output_path.exists():
        shutil.rmtree(output_path)
    output_path.mkdir(parents=True)


def find_and_copy_protos(src_folder: Path, dest_folder: Path) -> list[Path]:
    """Copy every ``.proto`` file below ``src_folder``, keeping relative paths.

    Returns:
        The destination paths written, in traversal order
    """
    if not src_folder.is_dir():
        raise VendorError(f"Cannot find expected directory {src_folder}")

    copied: list[Path] = []
    for src_file in sorted(src_folder.rglob(f"*{PROTO_SUFFIX}")):
        if not src_file.is_file():
            continue
        dest = dest_folder / src_file.relative_to(src_folder)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src_file, dest)
        logger.debug(f"Copied {src_file} to {dest}")
        copied.append(dest)
    return copied


def vendor_import(imp: Import, backend: GitBackend, settings: ProtovendSettings) -> list[Path]:
    """Check out ``imp`` at its pinned commit, validate it and copy its protos."""
    logger.info(f"Fetching proto files {imp.branch} branch from git repo. Current: {imp.url}")
    clone_location = backend.checkout(imp.url, imp.branch, imp.commit)

    sanitised_path = imp.url.sanitised_path
    src_folder = clone_location / settings.proto_dir / sanitised_path
    dest_folder = settings.output_path / sanitised_path

    run_checks(clone_location, imp.url, settings.proto_dir)

    return find_and_copy_protos(src_folder, dest_folder)


def vendor(imports: list[Import], backend: GitBackend, settings: ProtovendSettings) -> int:
    """Rebuild the output directory from ``imports``.

    The output directory is wiped first and imports are processed in order,
    stopping at the first failure. A failed run therefore leaves only the
    imports before the failing one in place.

    Returns:
        Number of proto files copied
    """
    prepare_output_directory(settings.output_path)

    total = 0
    for imp in imports:
        total += len(vendor_import(imp, backend, settings))
    return total
