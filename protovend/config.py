"""Process-wide paths and settings."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field

CACHE_DIR_ENV = "PROTOVEND_CACHE_DIR"


def default_cache_dir() -> Path:
    """Location of the shared git cache when nothing overrides it."""
    return Path(tempfile.gettempdir()) / ".protovend" / "repos"


class ProtovendSettings(BaseModel):
    """Paths used by every protovend operation.

    Built once at startup and passed to each component, so tests can point
    everything at temporary directories.
    """

    project_dir: Path = Field(default_factory=Path.cwd, description="Consuming project root")
    manifest_name: str = Field(default=".protovend.yml", description="Manifest file name")
    lock_name: str = Field(default=".protovend.lock", description="Lock file name")
    proto_dir: Path = Field(
        default=Path("proto"), description="Proto root inside every repository"
    )
    output_dir: Path = Field(
        default=Path("vendor/proto"), description="Vendored output, relative to project_dir"
    )
    cache_dir: Path = Field(
        default_factory=default_cache_dir, description="Local cache of cloned repositories"
    )

    @property
    def manifest_path(self) -> Path:
        return self.project_dir / self.manifest_name

    @property
    def lock_path(self) -> Path:
        return self.project_dir / self.lock_name

    @property
    def output_path(self) -> Path:
        return self.project_dir / self.output_dir

    @classmethod
    def from_env(
        cls,
        project_dir: str | Path | None = None,
        cache_dir: str | Path | None = None,
    ) -> ProtovendSettings:
        """Build settings, honouring PROTOVEND_CACHE_DIR when no cache dir is given."""
        values: dict[str, Path] = {}
        if project_dir is not None:
            values["project_dir"] = Path(project_dir)
        if cache_dir is None:
            cache_dir = os.environ.get(CACHE_DIR_ENV) or None
        if cache_dir is not None:
            values["cache_dir"] = Path(cache_dir)
        return cls(**values)
