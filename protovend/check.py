"""Proto directory layout checks.

Every repository keeps its protos under ``<proto root>/<sanitised path>``:

- P001: no ``.proto`` file may sit directly in the proto root
- P002: the proto root must contain the repository's own sanitised path
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from protovend.errors import StructureViolationError
from protovend.models.git_url import GitUrl

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Layout rule identifiers."""

    P001 = "P001"  # .proto file in the proto root
    P002 = "P002"  # missing <sanitised path> directory


class CheckResult(BaseModel):
    """A single layout violation."""

    checked_resource: Path = Field(..., description="Directory the rule was checked against")
    message: str = Field(..., description="How to fix the violation")
    error_code: ErrorCode

    def __str__(self) -> str:
        return f"{self.checked_resource}: {self.error_code.value} {self.message}"


def check_root_proto_folder_has_no_protos(
    proto_root: Path, relative_proto_dir: Path
) -> list[CheckResult]:
    """P001: report each ``.proto`` file stored directly in ``proto_root``."""
    if not proto_root.is_dir():
        return []

    message = (
        f".proto files should not be stored in the root /proto folder; "
        f"they should be moved to {relative_proto_dir}. "
        f"If source is from another repo please ask the owners to update"
    )
    return [
        CheckResult(checked_resource=proto_root, message=message, error_code=ErrorCode.P001)
        for entry in sorted(proto_root.iterdir())
        if entry.is_file() and entry.suffix == ".proto"
    ]


def check_proto_directory_structure(
    proto_root: Path, project_proto_dir: Path
) -> list[CheckResult]:
    """P002: ``project_proto_dir`` must exist under ``proto_root``."""
    if project_proto_dir.is_dir():
        return []

    message = (
        f"Proto folder structure is not correct; it should contain the directory "
        f"{project_proto_dir.relative_to(proto_root)}. "
        f"If source is from another repo please ask the owners to update"
    )
    return [CheckResult(checked_resource=proto_root, message=message, error_code=ErrorCode.P002)]


def collect_violations(project_root: Path, url: GitUrl, proto_dir: Path) -> list[CheckResult]:
    """Evaluate every rule against the repository at ``project_root``."""
    proto_root = project_root / proto_dir
    relative_proto_dir = Path(url.sanitised_path)
    project_proto_dir = proto_root / relative_proto_dir

    return [
        *check_proto_directory_structure(proto_root, project_proto_dir),
        *check_root_proto_folder_has_no_protos(proto_root, relative_proto_dir),
    ]


def run_checks(project_root: Path, url: GitUrl, proto_dir: Path = Path("proto")) -> None:
    """Check the layout of ``project_root``, logging and raising on any violation.

    Raises:
        StructureViolationError: if at least one rule is broken
    """
    logger.info("Running protovend checks..")
    violations = collect_violations(project_root, url, proto_dir)

    for violation in violations:
        logger.error(str(violation))

    if violations:
        raise StructureViolationError(violations)
