"""Application preferences stored in config.json.

The stored document is a flat key/value map. Reads merge it over
``DEFAULT_PREFERENCES`` so every documented key always has a value.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

from sweethosts.storage import JsonDocument, data_dir_lock

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"

# Command run after the system hosts file has been applied
CMD_AFTER_HOSTS_APPLY = "cmd_after_hosts_apply"

DEFAULT_PREFERENCES: dict[str, Any] = {
    "left_panel_show": True,
    "left_panel_width": 270,
    "use_system_window_frame": False,
    "write_mode": "append",
    "history_limit": 50,
    "locale": None,
    "theme": "light",
    "choice_mode": 2,
    "show_title_on_tray": False,
    "hide_at_launch": False,
    "send_usage_data": False,
    CMD_AFTER_HOSTS_APPLY: "",
    "remove_duplicate_records": False,
    "hide_dock_icon": False,
    "use_proxy": False,
    "proxy_protocol": "http",
    "proxy_host": "",
    "proxy_port": 0,
    "http_api_on": False,
    "http_api_only_local": True,
    "tray_mini_window": True,
    "multi_chose_folder_switch_all": False,
    "auto_download_update": True,
    "env": "PROD",
}


class ConfigSource(Protocol):
    """Read access to preference values."""

    def get(self, key: str) -> Any | None: ...


class Preferences:
    """Preferences document merged over the documented defaults."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self.document = JsonDocument(data_dir / CONFIG_FILENAME, default_factory=dict)

    def all(self) -> dict[str, Any]:
        """Return the effective preferences (defaults overlaid with stored)."""
        merged = dict(DEFAULT_PREFERENCES)
        merged.update(self.document.read())
        return merged

    def get(self, key: str) -> Any | None:
        return self.all().get(key)

    def set(self, key: str, value: Any) -> bool:
        """Store a single preference value.

        Returns:
            True if written.
        """
        with data_dir_lock(self.data_dir):
            stored = self.document.read()
            stored[key] = value
            return self.document.write(stored)

    def update(self, values: dict[str, Any]) -> bool:
        """Replace the stored preferences document.

        Returns:
            True if written.
        """
        with data_dir_lock(self.data_dir):
            return self.document.write(dict(values))


__all__ = [
    "CMD_AFTER_HOSTS_APPLY",
    "CONFIG_FILENAME",
    "DEFAULT_PREFERENCES",
    "ConfigSource",
    "Preferences",
]
