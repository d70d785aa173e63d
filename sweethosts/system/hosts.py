"""System hosts file location and managed-block handling.

In append write mode the user's own hosts entries are kept and the
composed profiles are written below a marker line. Everything from the
first marker onward belongs to sweethosts and is replaced on each apply.
"""

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path, PureWindowsPath

logger = logging.getLogger(__name__)

POSIX_HOSTS_PATH = "/etc/hosts"
WINDOWS_HOSTS_FALLBACK = r"C:\Windows\system32\drivers\etc\hosts"

CONTENT_START = "# --- SWEETHOSTS_CONTENT_START ---\n"
# Marker written by SwitchHosts, recognised when stripping old content
LEGACY_CONTENT_START = "# --- SWITCHHOSTS_CONTENT_START ---\n"
CONTENT_MARKERS = (CONTENT_START, LEGACY_CONTENT_START)


def is_windows(platform: str | None = None) -> bool:
    return (platform or sys.platform) == "win32"


def system_hosts_path(
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Return the path of the system hosts file.

    Args:
        platform: Platform name (defaults to ``sys.platform``).
        environ: Environment (defaults to ``os.environ``).

    Returns:
        ``/etc/hosts`` on POSIX; the drivers/etc path under ``windir`` on
        Windows, or the standard location when ``windir`` is unset.
    """
    if not is_windows(platform):
        return POSIX_HOSTS_PATH
    env = os.environ if environ is None else environ
    windir = env.get("windir") or env.get("WINDIR")
    if not windir:
        return WINDOWS_HOSTS_FALLBACK
    return str(PureWindowsPath(windir) / "system32" / "drivers" / "etc" / "hosts")


def read_hosts(path: str | Path) -> str:
    """Read a hosts file, treating an unreadable file as empty."""
    try:
        with open(path, encoding="utf-8", errors="replace", newline="") as f:
            return f.read()
    except OSError as e:
        logger.warning("Could not read hosts file %s: %s", path, e)
        return ""


def origin_content(system_content: str) -> str:
    """Return the user's own part of a hosts file.

    Strips everything from the first managed-block marker onward, along
    with trailing whitespace. Content without a marker is returned as is.
    """
    indexes = [
        i for i in (system_content.find(m) for m in CONTENT_MARKERS) if i != -1
    ]
    if not indexes:
        return system_content
    return system_content[: min(indexes)].rstrip()


def build_system_document(system_content: str, composed: str) -> str:
    """Combine the current system hosts with composed profile content.

    Args:
        system_content: Current system hosts text.
        composed: Output of the composer.

    Returns:
        The user's original entries followed by the managed block, or by
        a single newline when nothing is active.
    """
    origin = origin_content(system_content)
    if not composed:
        return origin + "\n"
    return f"{origin}\n\n\n\n{CONTENT_START}\n\n{composed}"


__all__ = [
    "CONTENT_MARKERS",
    "CONTENT_START",
    "LEGACY_CONTENT_START",
    "POSIX_HOSTS_PATH",
    "WINDOWS_HOSTS_FALLBACK",
    "build_system_document",
    "is_windows",
    "origin_content",
    "read_hosts",
    "system_hosts_path",
]
