"""Data bundle import/export.

A bundle holds the profile list, the trash and the hosts history of a
data directory in one YAML or JSON file. The format is chosen by the
file extension (.yaml, .yml for YAML, .json for JSON).

Importing replaces the profile list and the trash; history in a bundle
is informational and never imported.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from sweethosts import __version__
from sweethosts.profiles.schema import DataBundle
from sweethosts.profiles.store import dump_tree
from sweethosts.profiles.trash import dump_trash
from sweethosts.storage import data_dir_lock, write_documents

if TYPE_CHECKING:
    from sweethosts.workspace import Workspace

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIX = ".json"


class BundleImportError(Exception):
    """Raised when a bundle file cannot be read or parsed."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


def version_tuple(version: str = __version__) -> list[int]:
    """Convert a dotted version string to a list of integers."""
    return [int(part) for part in version.split(".") if part.isdigit()]


def _check_suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in (*YAML_SUFFIXES, JSON_SUFFIX):
        raise ValueError(
            f"Unsupported file extension '{suffix}'. Use .yaml, .yml, or .json"
        )
    return suffix


def load_bundle_data(path: Path) -> dict[str, Any]:
    """Load a bundle file and return its contents as a dict.

    Args:
        path: Path to the YAML or JSON file.

    Returns:
        Parsed content as a dictionary.

    Raises:
        ValueError: If the extension is unsupported or the content is not
            a mapping.
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If a YAML file is not valid YAML.
        json.JSONDecodeError: If a JSON file is not valid JSON.
    """
    suffix = _check_suffix(path)
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) if suffix in YAML_SUFFIXES else json.load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping, got {type(data).__name__}")
    return data


def build_bundle(workspace: Workspace) -> dict[str, Any]:
    """Collect the list, trash and history of a workspace."""
    return {
        "list": dump_tree(workspace.tree_store.load()),
        "trashcan": dump_trash(workspace.trash_store.list()),
        "history": [e.model_dump() for e in workspace.history.list()],
        "version": version_tuple(),
    }


def bundle_to_yaml_string(data: dict[str, Any]) -> str:
    result: str = yaml.dump(
        data, default_flow_style=False, allow_unicode=True, sort_keys=False
    )
    return result


def export_data(workspace: Workspace, path: Path) -> Path:
    """Export a workspace bundle to a file.

    Args:
        workspace: Workspace to export.
        path: Destination file (.yaml, .yml or .json).

    Returns:
        The written path.

    Raises:
        ValueError: If file extension is not supported.
        OSError: If the file cannot be written.
    """
    suffix = _check_suffix(path)
    data = build_bundle(workspace)
    with open(path, "w", encoding="utf-8") as f:
        if suffix in YAML_SUFFIXES:
            f.write(bundle_to_yaml_string(data))
        else:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
    return path


def import_data(workspace: Workspace, path: Path) -> bool:
    """Replace the profile list and trash with those of a bundle file.

    Sections missing from the bundle are left untouched.

    Args:
        workspace: Workspace to import into.
        path: Bundle file.

    Returns:
        True if the stores were written.

    Raises:
        ValueError: If file extension is not supported.
        BundleImportError: If the file cannot be read, parsed or validated.
    """
    _check_suffix(path)
    try:
        raw = load_bundle_data(path)
    except OSError as e:
        raise BundleImportError(f"read_error: {e}", code="read_error") from e
    except (ValueError, yaml.YAMLError) as e:
        raise BundleImportError(f"parse_error: {e}", code="parse_error") from e

    try:
        bundle = DataBundle.model_validate(raw)
    except ValidationError as e:
        raise BundleImportError(f"parse_error: {e}", code="parse_error") from e

    pairs: list[tuple[Any, Any]] = []
    if bundle.tree is not None:
        pairs.append((workspace.tree_store.document, dump_tree(bundle.tree)))
    if bundle.trashcan is not None:
        pairs.append((workspace.trash_store.document, dump_trash(bundle.trashcan)))
    if not pairs:
        return True
    with data_dir_lock(workspace.data_dir):
        return write_documents(pairs)


__all__ = [
    "BundleImportError",
    "build_bundle",
    "bundle_to_yaml_string",
    "export_data",
    "import_data",
    "load_bundle_data",
    "version_tuple",
]
