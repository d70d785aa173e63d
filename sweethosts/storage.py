"""Whole-document JSON storage helpers.

Every store in sweethosts persists as one JSON document per file in the
data directory. Reads degrade to an empty default when the file is
missing, unreadable or malformed; writes report success as a boolean.

Writes go through a temporary sibling file followed by ``os.replace`` so
a reader never observes a half-written document.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

if sys.platform != "win32":
    import fcntl

logger = logging.getLogger(__name__)

LOCK_FILENAME = ".lock"


class JsonDocument:
    """A JSON document stored in a single file.

    Attributes:
        path: Location of the document.
        default_factory: Builds the value returned when the file cannot be read.
    """

    def __init__(self, path: Path, default_factory: type = list) -> None:
        self.path = path
        self.default_factory = default_factory

    def __repr__(self) -> str:
        return f"JsonDocument({str(self.path)!r})"

    def read(self) -> Any:
        """Read and parse the document.

        Returns:
            Parsed value, or an empty default if the file is missing,
            unreadable, malformed or of the wrong top-level type.
        """
        if not self.path.exists():
            return self.default_factory()
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable document %s: %s", self.path, e)
            return self.default_factory()
        if not isinstance(data, self.default_factory):
            logger.warning(
                "Ignoring document %s: expected %s, got %s",
                self.path,
                self.default_factory.__name__,
                type(data).__name__,
            )
            return self.default_factory()
        return data

    def write(self, data: Any) -> bool:
        """Serialize and write the document.

        Args:
            data: JSON-serializable value.

        Returns:
            True if the document was written.
        """
        return write_documents([(self, data)])


def _stage(path: Path, data: Any) -> Path:
    """Write data to a temporary sibling of path and return its location."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return Path(tmp_name)


def write_documents(pairs: list[tuple[JsonDocument, Any]]) -> bool:
    """Write several documents, committing only if all can be staged.

    Each value is first serialized to a temporary file next to its
    target. If any serialization or write fails, every staged file is
    removed and no target is touched. Otherwise all staged files are
    moved into place.

    Args:
        pairs: (document, value) pairs to write.

    Returns:
        True if every document was written.
    """
    staged: list[tuple[Path, Path]] = []
    try:
        for document, data in pairs:
            staged.append((_stage(document.path, data), document.path))
    except (OSError, TypeError, ValueError) as e:
        logger.error("Failed to stage documents: %s", e)
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)
        return False

    try:
        for tmp_path, target in staged:
            os.replace(tmp_path, target)
    except OSError as e:
        logger.error("Failed to commit documents: %s", e)
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)
        return False
    return True


@contextmanager
def data_dir_lock(data_dir: Path) -> Iterator[None]:
    """Hold an exclusive advisory lock on the data directory.

    Used around load-mutate-save cycles. On platforms without ``fcntl``
    the lock is a no-op.

    Args:
        data_dir: Data directory to lock.

    Yields:
        None when the lock is held.
    """
    if sys.platform == "win32":
        yield
        return

    data_dir.mkdir(parents=True, exist_ok=True)
    fd = os.open(str(data_dir / LOCK_FILENAME), os.O_RDWR | os.O_CREAT, 0o600)
    try:
        fcntl.flock(fd, fcntl.LOCK_EX)
        logger.debug("Data directory lock acquired: %s", data_dir)
        try:
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            logger.debug("Data directory lock released: %s", data_dir)
    finally:
        os.close(fd)


__all__ = ["JsonDocument", "data_dir_lock", "write_documents"]
