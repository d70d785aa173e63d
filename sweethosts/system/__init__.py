"""System hosts file module.

This module handles:
- Locating and reading the platform hosts file
- The managed block used in append write mode
- Installing documents directly, via an elevated helper, or in safe mode
"""

from sweethosts.system.apply import ApplyPipeline, refresh, write_hosts_to_system
from sweethosts.system.hosts import (
    build_system_document,
    origin_content,
    read_hosts,
    system_hosts_path,
)
from sweethosts.system.installer import (
    InstallerError,
    PrivilegedInstaller,
    SudoInstaller,
)

__all__ = [
    "ApplyPipeline",
    "InstallerError",
    "PrivilegedInstaller",
    "SudoInstaller",
    "build_system_document",
    "origin_content",
    "read_hosts",
    "refresh",
    "system_hosts_path",
    "write_hosts_to_system",
]
