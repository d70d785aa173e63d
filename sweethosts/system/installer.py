"""Privileged installation of the hosts file.

When the process cannot write the system hosts file itself, the apply
pipeline hands a prepared file to a ``PrivilegedInstaller``. The default
implementation uses ``sudo -S``, feeding the user's password on stdin so
it never appears on a command line, in logs or in stored documents.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol

logger = logging.getLogger(__name__)

# Copies $1 over $2 and resets standard hosts permissions
COPY_SCRIPT = 'cat "$1" > "$2" && chmod 644 "$2"'

SECRET_MASK = "********"


class InstallerError(Exception):
    """Privileged installation failed."""

    def __init__(self, message: str, error_code: str = "no_access") -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class PrivilegedInstaller(Protocol):
    """Copies a prepared file over a path the process cannot write."""

    def install(self, source_path: str, target_path: str, secret: str) -> None:
        """Install source_path at target_path.

        Raises:
            InstallerError: If the copy did not succeed.
        """
        ...


def mask_secret(text: str, secret: str) -> str:
    """Replace every occurrence of secret in text."""
    if not secret:
        return text
    return text.replace(secret, SECRET_MASK)


class SudoInstaller:
    """Install files with ``sudo -S sh -c``.

    Attributes:
        timeout: Seconds to wait for sudo before giving up.
        sudo: sudo executable.
    """

    def __init__(self, timeout: int | None = 60, sudo: str = "sudo") -> None:
        self.timeout = timeout
        self.sudo = sudo

    def command(self, source_path: str, target_path: str) -> list[str]:
        """Compose the sudo command line (contains no secret)."""
        return [
            self.sudo,
            "-S",
            "-p",
            "",
            "sh",
            "-c",
            COPY_SCRIPT,
            "sh",
            source_path,
            target_path,
        ]

    def install(self, source_path: str, target_path: str, secret: str) -> None:
        cmd = self.command(source_path, target_path)
        logger.info("Installing %s with elevated privileges", target_path)
        try:
            result = subprocess.run(
                cmd,
                input=f"{secret}\n",
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            logger.error("Elevated install timed out after %s seconds", self.timeout)
            raise InstallerError(
                f"Elevation timed out after {self.timeout} seconds",
                error_code="elevation_timeout",
            ) from e
        except OSError as e:
            logger.error("Failed to run elevation helper: %s", e)
            raise InstallerError(
                mask_secret(f"Failed to run {self.sudo}: {e}", secret)
            ) from e

        if result.returncode != 0:
            message = mask_secret(result.stderr.strip(), secret)
            logger.error(
                "Elevated install failed with exit code %d", result.returncode
            )
            raise InstallerError(
                message or f"{self.sudo} exited with code {result.returncode}"
            )
        logger.info("Elevated install of %s succeeded", target_path)


__all__ = [
    "COPY_SCRIPT",
    "InstallerError",
    "PrivilegedInstaller",
    "SudoInstaller",
    "mask_secret",
]
