"""Exception hierarchy for protovend."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from protovend.check import CheckResult


class ProtovendError(Exception):
    """Base class for every error reported by protovend."""


class InvalidUrlError(ProtovendError, ValueError):
    """A string is not an accepted git remote url."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid Git URL: {url!r}")
        self.url = url


class IncompatibleVersionError(ProtovendError):
    """A metadata file requires a newer protovend."""

    def __init__(self, running: str, required: str) -> None:
        super().__init__(
            f"protovend cli version {running} is too old for included metadata files. "
            f"Minimum version must be {required}"
        )
        self.running = running
        self.required = required


class SchemaError(ProtovendError):
    """A metadata document matches none (or more than one) of the accepted shapes."""


class ProjectNotInitialisedError(ProtovendError):
    """The project has no manifest file."""

    def __init__(self) -> None:
        super().__init__("Project not initialised. Please run 'protovend init'")


class GitError(ProtovendError):
    """A git command failed or could not be started."""

    def __init__(
        self,
        message: str,
        cmd: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        detail = message
        if returncode is not None:
            detail += f" (exit code {returncode})"
        if stderr.strip():
            detail += f": {stderr.strip()}"
        super().__init__(detail)
        self.cmd = cmd or []
        self.returncode = returncode
        self.stderr = stderr


class StructureViolationError(ProtovendError):
    """A repository's proto directory breaks one or more layout rules."""

    def __init__(self, violations: list[CheckResult]) -> None:
        super().__init__("Validation errors reported")
        self.violations = violations


class VendorError(ProtovendError):
    """Vendoring could not locate the files it was asked to copy."""
