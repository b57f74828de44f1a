"""Manifest (desired dependencies) models."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from protovend.models.git_url import GitUrl
from protovend.models.version import SemVer, running_version

logger = logging.getLogger(__name__)


class Dependency(BaseModel):
    """A repository the project wants to vendor."""

    url: GitUrl
    branch: str

    model_config = {"frozen": True}


class Manifest(BaseModel):
    """Contents of the hand-edited manifest file."""

    min_protovend_version: SemVer = Field(default_factory=running_version)
    vendor: list[Dependency] = Field(default_factory=list)

    model_config = {"arbitrary_types_allowed": True}

    @classmethod
    def load(cls, path: Path) -> Manifest:
        """Load and migrate a manifest file."""
        from protovend.migrate import load_manifest

        return load_manifest(path)

    def write(self, path: Path) -> None:
        """Write the manifest, sorting dependencies by url."""
        self.vendor.sort(key=lambda dep: dep.url)
        with open(path, "w") as f:
            yaml.safe_dump(
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

    def add_dependency(self, url: GitUrl, branch: str, path: Path) -> bool:
        """Add ``url`` on ``branch``, or move an existing entry to ``branch``.

        Returns True when the manifest was rewritten.
        """
        for index, dep in enumerate(self.vendor):
            if dep.url != url:
                continue
            if dep.branch == branch:
                logger.info(f"{url} has already been added to {path.name}")
                return False
            self.vendor[index] = Dependency(url=url, branch=branch)
            self.write(path)
            logger.info(f"Updated {url} to use branch {branch}")
            return True

        self.vendor.append(Dependency(url=url, branch=branch))
        self.write(path)
        logger.info(f"{url} added to protovend metadata")
        return True
