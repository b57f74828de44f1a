"""Tool version handling for metadata files."""

from __future__ import annotations

from typing import Annotated, Any

from packaging.version import InvalidVersion, Version
from pydantic import BeforeValidator, PlainSerializer


def parse_version(value: Any) -> Version:
    if isinstance(value, Version):
        return value
    try:
        # YAML reads "1.0" as a float
        return Version(str(value))
    except InvalidVersion as e:
        raise ValueError(f"invalid version {value!r}") from e


def running_version() -> Version:
    from protovend import __version__

    return Version(__version__)


def is_supported(min_version: Version) -> bool:
    """Check that this protovend is at least ``min_version``."""
    return min_version <= running_version()


SemVer = Annotated[
    Version,
    BeforeValidator(parse_version),
    PlainSerializer(str, return_type=str),
]
