"""Lock (resolved imports) models."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_serializer, field_validator

from protovend.models.git_url import GitUrl
from protovend.models.manifest import Dependency
from protovend.models.version import SemVer, running_version

DATE_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
DATE_FORMATS = (DATE_FORMAT, "%Y-%m-%d %H:%M:%S")

# strptime takes at most microseconds; older locks carry nanoseconds
_EXTRA_FRACTION_DIGITS = re.compile(r"(\.\d{6})\d+$")


def parse_timestamp(value: Any) -> datetime:
    """Parse an ``updated`` value written by any protovend version."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    text = _EXTRA_FRACTION_DIGITS.sub(r"\1", str(value).strip())
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"value cannot be parsed: {value}")


class Import(BaseModel):
    """A dependency pinned to an exact commit."""

    branch: str
    commit: str
    url: GitUrl

    model_config = {"frozen": True}

    def matches(self, dependency: Dependency) -> bool:
        """Same url and branch, whatever the commit."""
        return self.url == dependency.url and self.branch == dependency.branch


class Lock(BaseModel):
    """Contents of the generated lock file."""

    imports: list[Import] = Field(default_factory=list)
    min_protovend_version: SemVer = Field(default_factory=running_version)
    updated: datetime = Field(default_factory=datetime.now)

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("updated", mode="before")
    @classmethod
    def _parse_updated(cls, value: Any) -> datetime:
        return parse_timestamp(value)

    @field_serializer("updated")
    def _format_updated(self, value: datetime) -> str:
        return value.strftime(DATE_FORMAT)

    @classmethod
    def load(cls, path: Path) -> Lock:
        """Load and migrate a lock file, or return an empty lock if there is none."""
        from protovend.migrate import load_lock

        return load_lock(path)

    def write(self, path: Path) -> None:
        """Write the lock, sorting imports by url and refreshing ``updated``."""
        self.imports.sort(key=lambda imp: imp.url)
        self.updated = datetime.now()
        with open(path, "w") as f:
            yaml.safe_dump(
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

    def clear_imports(self, url: GitUrl) -> None:
        """Forget every import of ``url`` so the next update resolves it afresh."""
        self.imports = [imp for imp in self.imports if imp.url != url]

    def clear_all_imports(self) -> None:
        self.imports = []
