"""Apply pipeline: install a hosts document as the system hosts file.

The pipeline tries the cheapest safe route first:

1. Sandbox mode writes to a timestamped temp file and nothing else.
2. A direct write to the system path, when the process has the rights.
3. On POSIX, when the caller supplied a password, a privileged copy
   through a ``PrivilegedInstaller``.

Every outcome is returned as an ``ApplyOutcome`` value; only the two
installed statuses count as success. A successful system install appends
the replaced and the new content to the hosts history, in that order.
The elevation password is never logged, stored or returned.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from sweethosts.history import HistoryLog
from sweethosts.profiles.compose import compose
from sweethosts.profiles.trash import now_ms
from sweethosts.system.hosts import (
    build_system_document,
    is_windows,
    read_hosts,
    system_hosts_path,
)
from sweethosts.system.installer import (
    InstallerError,
    PrivilegedInstaller,
    SudoInstaller,
    mask_secret,
)
from sweethosts.types import ApplyOutcome, ApplyStatus, WriteMode

if TYPE_CHECKING:
    from sweethosts.workspace import Workspace

logger = logging.getLogger(__name__)

NO_ACCESS = "no_access"
IO_ERROR = "io_error"


class ApplyPipeline:
    """Installs hosts documents, with sandbox and elevation handling.

    Attributes:
        history: Log receiving old/new content on a system install.
        hosts_path: System hosts file path.
        sandbox: Redirect writes to a temp file and skip history.
        installer: Privileged installer used when a secret is supplied.
        tmp_dir: Directory for sandbox and elevation temp files.
        platform: Platform name used to decide if elevation is available.
    """

    def __init__(
        self,
        history: HistoryLog,
        *,
        hosts_path: str | Path | None = None,
        sandbox: bool = False,
        installer: PrivilegedInstaller | None = None,
        tmp_dir: Path | None = None,
        platform: str | None = None,
    ) -> None:
        self.history = history
        self.platform = platform
        self.hosts_path = str(hosts_path or system_hosts_path(platform))
        self.sandbox = sandbox
        self.installer: PrivilegedInstaller = installer or SudoInstaller()
        self.tmp_dir = tmp_dir

    def _tmp_dir(self) -> Path:
        return Path(self.tmp_dir) if self.tmp_dir else Path(tempfile.gettempdir())

    def _write_sandboxed(self, document: str) -> Path:
        """Write document to a fresh timestamped file in the temp directory."""
        directory = self._tmp_dir()
        directory.mkdir(parents=True, exist_ok=True)
        stamp = now_ms()
        path = directory / f"sweethosts_safe_{stamp}.hosts"
        suffix = 0
        while path.exists():
            suffix += 1
            path = directory / f"sweethosts_safe_{stamp}_{suffix}.hosts"
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(document)
        return path

    def _record_history(self, old_content: str, new_content: str) -> None:
        if self.history.append(old_content) is None:
            logger.error("Failed to record previous hosts content in history")
        if self.history.append(new_content) is None:
            logger.error("Failed to record applied hosts content in history")

    def _restore(self, old_content: str) -> None:
        """Put the previous content back after a partial direct write."""
        try:
            with open(self.hosts_path, "w", encoding="utf-8", newline="") as f:
                f.write(old_content)
        except OSError as e:
            logger.error("Could not restore %s: %s", self.hosts_path, e)
        else:
            logger.info("Restored previous content of %s", self.hosts_path)

    def _installed(self, old_content: str, document: str) -> ApplyOutcome:
        self._record_history(old_content, document)
        return ApplyOutcome(
            status=ApplyStatus.INSTALLED,
            old_content=old_content,
            new_content=document,
        )

    def apply(
        self, document: str, elevation_secret: str | None = None
    ) -> ApplyOutcome:
        """Install a hosts document.

        Args:
            document: Full hosts file content to install.
            elevation_secret: Password for the privileged installer; only
                used when the direct write fails on POSIX.

        Returns:
            ApplyOutcome describing what happened.
        """
        old_content = read_hosts(self.hosts_path)

        if self.sandbox:
            try:
                path = self._write_sandboxed(document)
            except OSError as e:
                logger.error("Sandbox write failed: %s", e)
                return ApplyOutcome(
                    status=ApplyStatus.IO_FAILURE,
                    message=str(e),
                    code=IO_ERROR,
                    old_content=old_content,
                )
            logger.info("Safe mode: wrote hosts to %s", path)
            return ApplyOutcome(
                status=ApplyStatus.INSTALLED_SANDBOXED,
                sandbox_path=str(path),
                old_content=old_content,
                new_content=document,
            )

        try:
            f = open(self.hosts_path, "w", encoding="utf-8", newline="")
        except OSError as e:
            logger.info("Direct write to %s failed: %s", self.hosts_path, e)
        else:
            try:
                with f:
                    f.write(document)
            except OSError as e:
                # the file is already truncated at this point
                logger.error("Writing %s failed: %s", self.hosts_path, e)
                self._restore(old_content)
                return ApplyOutcome(
                    status=ApplyStatus.IO_FAILURE,
                    message=str(e),
                    code=IO_ERROR,
                    old_content=old_content,
                )
            logger.info("Wrote hosts to %s", self.hosts_path)
            return self._installed(old_content, document)

        if not elevation_secret or is_windows(self.platform):
            return ApplyOutcome(
                status=ApplyStatus.PERMISSION_DENIED,
                code=NO_ACCESS,
                old_content=old_content,
            )

        return self._apply_elevated(document, old_content, elevation_secret)

    def _apply_elevated(
        self, document: str, old_content: str, secret: str
    ) -> ApplyOutcome:
        """Install through the privileged installer via a private temp file."""
        try:
            directory = self._tmp_dir()
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix="swh_", suffix=".txt", dir=directory
            )
        except OSError as e:
            logger.error("Could not create temp file for elevated install: %s", e)
            return ApplyOutcome(
                status=ApplyStatus.IO_FAILURE,
                message=str(e),
                code=IO_ERROR,
                old_content=old_content,
            )

        try:
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                    f.write(document)
            except OSError as e:
                logger.error("Could not write temp file for elevated install: %s", e)
                return ApplyOutcome(
                    status=ApplyStatus.IO_FAILURE,
                    message=str(e),
                    code=IO_ERROR,
                    old_content=old_content,
                )
            try:
                self.installer.install(tmp_name, self.hosts_path, secret)
            except InstallerError as e:
                return ApplyOutcome(
                    status=ApplyStatus.PERMISSION_DENIED,
                    message=mask_secret(e.message, secret),
                    code=e.error_code,
                    old_content=old_content,
                )
        finally:
            Path(tmp_name).unlink(missing_ok=True)

        return self._installed(old_content, document)


def refresh(workspace: Workspace) -> ApplyOutcome:
    """Compose the stored tree and install it without elevation.

    On a system where the process lacks write access this reports
    ``permission_denied``; retrying with a password is up to the caller.
    """
    document = compose(workspace.tree_store.load(), workspace.content_store)
    return workspace.pipeline.apply(document)


def write_hosts_to_system(
    workspace: Workspace,
    elevation_secret: str | None = None,
    write_mode: WriteMode | str | None = None,
) -> ApplyOutcome:
    """Apply the composed profiles the way the desktop shell does.

    In append mode the user's own hosts entries above the managed-block
    marker are kept; in overwrite mode the composed document replaces the
    whole file.

    Args:
        workspace: Data directory workspace.
        elevation_secret: Optional password for the privileged installer.
        write_mode: Overrides the ``write_mode`` preference.

    Returns:
        ApplyOutcome of the install.
    """
    try:
        mode = WriteMode(write_mode or workspace.preferences.get("write_mode"))
    except ValueError:
        logger.warning("Unknown write mode %r, using append", write_mode)
        mode = WriteMode.APPEND
    composed = compose(workspace.tree_store.load(), workspace.content_store)
    if mode is WriteMode.APPEND:
        current = read_hosts(workspace.pipeline.hosts_path)
        document = build_system_document(current, composed)
    else:
        document = composed
    return workspace.pipeline.apply(document, elevation_secret=elevation_secret)


__all__ = [
    "IO_ERROR",
    "NO_ACCESS",
    "ApplyPipeline",
    "refresh",
    "write_hosts_to_system",
]
