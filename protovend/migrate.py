"""Loading of manifest and lock files written by any protovend version.

Three document shapes exist in the wild:

- current: entries carry a ``url``
- legacy: entries carry a ``{repo, host}`` pair, converted to an ssh url
- empty (manifest only): the ``vendor`` field is absent or null

Each shape is tried in order against the parsed YAML tree. A document
whose entries carry both field sets is rejected rather than resolved by
priority. Documents are accepted whole or not at all, and the
``min_protovend_version`` gate is applied after normalisation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from protovend.errors import IncompatibleVersionError, ProjectNotInitialisedError, SchemaError
from protovend.models.git_url import GitUrl
from protovend.models.lock import Lock
from protovend.models.manifest import Manifest
from protovend.models.version import is_supported, running_version

logger = logging.getLogger(__name__)

URL_FIELDS = frozenset({"url"})
LEGACY_FIELDS = frozenset({"repo", "host"})
TEXT_FIELDS = ("branch", "commit")


@dataclass(frozen=True)
class Shape:
    """One accepted document layout."""

    name: str
    matches: Callable[[Any], bool]
    normalise: Callable[[Any, Path], list[dict[str, Any]]]


def _is_entry_list(entries: Any, fields: frozenset[str]) -> bool:
    return isinstance(entries, list) and all(
        isinstance(entry, dict) and fields <= entry.keys() for entry in entries
    )


def _text_fields(entry: dict[str, Any], path: Path) -> dict[str, Any]:
    """Restore branch and commit values YAML read as numbers.

    Integers convert back exactly. Floats and booleans have already lost
    their spelling (``1.10`` reads as ``1.1``), so they must be quoted.
    """
    fixed = dict(entry)
    for key in TEXT_FIELDS:
        value = entry.get(key)
        if isinstance(value, (bool, float)):
            raise SchemaError(
                f"{path}: {key} {value!r} was read as a {type(value).__name__}; "
                f"quote it, e.g. {key}: \"{value}\""
            )
        if isinstance(value, int):
            fixed[key] = str(value)
    return fixed


def _current_entries(entries: list[dict[str, Any]], path: Path) -> list[dict[str, Any]]:
    return [
        {**_text_fields(entry, path), "url": GitUrl.parse(str(entry["url"]))}
        for entry in entries
    ]


def _legacy_entries(entries: list[dict[str, Any]], path: Path) -> list[dict[str, Any]]:
    converted = []
    for entry in entries:
        rest = {k: v for k, v in _text_fields(entry, path).items() if k not in LEGACY_FIELDS}
        url = GitUrl.from_host_and_repo(str(entry["host"]), str(entry["repo"]))
        converted.append({**rest, "url": url})
    return converted


def _shapes(field: str, allow_empty: bool) -> list[Shape]:
    shapes = [
        Shape(
            "current",
            lambda doc: _is_entry_list(doc.get(field), URL_FIELDS),
            lambda doc, path: _current_entries(doc[field], path),
        ),
        Shape(
            "legacy",
            lambda doc: _is_entry_list(doc.get(field), LEGACY_FIELDS),
            lambda doc, path: _legacy_entries(doc[field], path),
        ),
    ]
    if allow_empty:
        shapes.append(Shape("empty", lambda doc: doc.get(field) is None, lambda doc, path: []))
    return shapes


def _check_mixed_entries(entries: Any, field: str, path: Path) -> None:
    if not isinstance(entries, list):
        return
    for index, entry in enumerate(entries):
        if isinstance(entry, dict) and URL_FIELDS & entry.keys() and LEGACY_FIELDS & entry.keys():
            raise SchemaError(
                f"{path} is ambiguous: {field!r} entry {index} has both url and repo/host fields"
            )


def _select_shape(doc: Any, field: str, allow_empty: bool, path: Path) -> Shape:
    if not isinstance(doc, dict):
        raise SchemaError(f"{path} is not a protovend metadata document")
    if "min_protovend_version" not in doc:
        raise SchemaError(f"{path} has no min_protovend_version")
    _check_mixed_entries(doc.get(field), field, path)

    matched = [shape for shape in _shapes(field, allow_empty) if shape.matches(doc)]
    if not matched:
        raise SchemaError(f"{path} does not match any known {field!r} format")
    if len(matched) > 1 and doc.get(field):
        names = ", ".join(shape.name for shape in matched)
        raise SchemaError(f"{path} is ambiguous: {field!r} entries match formats {names}")

    shape = matched[0]
    logger.debug(f"Reading {path} using the {shape.name} format")
    return shape


def _read_yaml(path: Path) -> Any:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaError(f"{path} is not valid YAML: {e}") from e


def _check_version(model: Manifest | Lock) -> None:
    if not is_supported(model.min_protovend_version):
        raise IncompatibleVersionError(
            str(running_version()), str(model.min_protovend_version)
        )


def migrate_manifest(doc: Any, path: Path) -> Manifest:
    """Normalise a parsed manifest document to the current model."""
    shape = _select_shape(doc, "vendor", allow_empty=True, path=path)
    data = {**doc, "vendor": shape.normalise(doc, path)}
    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        raise SchemaError(f"{path} is not a valid manifest: {e}") from e
    _check_version(manifest)
    return manifest


def migrate_lock(doc: Any, path: Path) -> Lock:
    """Normalise a parsed lock document to the current model."""
    shape = _select_shape(doc, "imports", allow_empty=False, path=path)
    if "updated" not in doc:
        raise SchemaError(f"{path} has no updated timestamp")
    data = {**doc, "imports": shape.normalise(doc, path)}
    try:
        lock = Lock.model_validate(data)
    except ValidationError as e:
        raise SchemaError(f"{path} is not a valid lock file: {e}") from e
    _check_version(lock)
    return lock


def load_manifest(path: Path) -> Manifest:
    if not path.is_file():
        raise ProjectNotInitialisedError()
    return migrate_manifest(_read_yaml(path), path)


def load_lock(path: Path) -> Lock:
    if not path.exists():
        return Lock()
    return migrate_lock(_read_yaml(path), path)
