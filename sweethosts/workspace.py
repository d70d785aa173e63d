"""Workspace: every store of one data directory, built from settings.

The data directory is resolved once into ``Settings`` and passed here,
so the stores never consult the environment themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from sweethosts.config import Settings, get_settings
from sweethosts.history import HistoryLog
from sweethosts.hooks import CommandHistoryLog
from sweethosts.preferences import Preferences
from sweethosts.profiles.store import ContentStore, ProfileTreeStore
from sweethosts.profiles.trash import TrashStore
from sweethosts.system.apply import ApplyPipeline
from sweethosts.system.installer import PrivilegedInstaller, SudoInstaller

logger = logging.getLogger(__name__)


@dataclass
class Workspace:
    """Stores and apply pipeline bound to one data directory."""

    data_dir: Path
    tree_store: ProfileTreeStore
    content_store: ContentStore
    trash_store: TrashStore
    history: HistoryLog
    cmd_history: CommandHistoryLog
    preferences: Preferences
    pipeline: ApplyPipeline
    settings: Settings


def open_workspace(
    settings: Settings | None = None,
    installer: PrivilegedInstaller | None = None,
) -> Workspace:
    """Build a workspace for the configured data directory.

    The data directory is created if missing; failure to create it is
    logged and left to the individual stores to report.

    Args:
        settings: Settings to use; loaded from the environment if omitted.
        installer: Privileged installer; ``SudoInstaller`` by default.

    Returns:
        Workspace instance.
    """
    if settings is None:
        settings = get_settings()
    data_dir = settings.data_dir
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Could not create data directory %s: %s", data_dir, e)

    tree_store = ProfileTreeStore(data_dir)
    history = HistoryLog(data_dir)
    pipeline = ApplyPipeline(
        history,
        hosts_path=settings.hosts_path,
        sandbox=settings.safe_mode,
        installer=installer or SudoInstaller(timeout=settings.elevation_timeout),
        tmp_dir=settings.tmp_dir,
    )
    return Workspace(
        data_dir=data_dir,
        tree_store=tree_store,
        content_store=ContentStore(data_dir),
        trash_store=TrashStore(data_dir, tree_store),
        history=history,
        cmd_history=CommandHistoryLog(data_dir),
        preferences=Preferences(data_dir),
        pipeline=pipeline,
        settings=settings,
    )


__all__ = ["Workspace", "open_workspace"]
