"""Git remote url model."""

from __future__ import annotations

import re
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from protovend.errors import InvalidUrlError

# scheme, then "://" or "@", host, ":" or "/", owner/repo, ".git", optional "/" or "#ref"
GIT_URL_PATTERN = re.compile(
    r"^(?:git|ssh|https?)(://|@)(.*)[:/]((.*)/(.*))(\.git)(/?|#[-\d\w._]+?)$"
)

_NON_PATH_CHARS = re.compile(r"[^a-z0-9/]")
_NON_ALNUM_CHARS = re.compile(r"[^A-Za-z0-9]")


def sanitise(value: str) -> str:
    """Lower-case ``value`` and keep only ASCII alphanumerics and ``/``."""
    return _NON_PATH_CHARS.sub("", value.lower())


def to_alpha_num(value: str) -> str:
    """Keep only the ASCII alphanumeric characters of ``value``."""
    return _NON_ALNUM_CHARS.sub("", value)


class GitUrl(str):
    """A validated git remote url.

    Equality and ordering are those of the url string itself: the ssh and
    https forms of the same remote are different urls.
    """

    __slots__ = ()

    def __new__(cls, value: str) -> GitUrl:
        value = value.strip()
        if not GIT_URL_PATTERN.match(value):
            raise InvalidUrlError(value)
        return super().__new__(cls, value)

    @classmethod
    def parse(cls, value: str) -> GitUrl:
        if isinstance(value, cls):
            return value
        return cls(value)

    @classmethod
    def from_host_and_repo(cls, host: str, repo: str) -> GitUrl:
        """Build the ssh url for a legacy ``{host, repo}`` pair."""
        return cls(f"git@{host}:{repo}.git")

    def _match(self) -> re.Match[str]:
        match = GIT_URL_PATTERN.match(self)
        assert match is not None
        return match

    @property
    def host(self) -> str:
        return self._match().group(2)

    @property
    def path(self) -> str:
        """The ``owner/repo`` part of the url."""
        return self._match().group(3)

    @property
    def sanitised_path(self) -> str:
        return sanitise(self.path)

    def __repr__(self) -> str:
        return f"GitUrl({str.__repr__(self)})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls.parse,
            core_schema.str_schema(),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )
