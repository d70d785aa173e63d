"""Tests for workspace construction."""

from pathlib import Path

from sweethosts.config import Settings
from sweethosts.system.installer import SudoInstaller
from sweethosts.workspace import open_workspace


class TestOpenWorkspace:
    """Test open_workspace."""

    def test_creates_data_dir(self, tmp_path: Path) -> None:
        """The data directory is created on open."""
        ws = open_workspace(Settings(data_dir=tmp_path / "new" / "data"))
        assert (tmp_path / "new" / "data").is_dir()
        assert ws.data_dir == tmp_path / "new" / "data"

    def test_stores_share_data_dir(self, tmp_path: Path) -> None:
        """Every store writes into the configured data directory."""
        ws = open_workspace(Settings(data_dir=tmp_path))
        assert ws.tree_store.document.path.parent == tmp_path
        assert ws.trash_store.document.path.parent == tmp_path
        assert ws.history.document.path.parent == tmp_path
        assert ws.cmd_history.document.path.parent == tmp_path
        assert ws.preferences.document.path.parent == tmp_path
        assert ws.content_store.data_dir == tmp_path

    def test_pipeline_from_settings(self, tmp_path: Path) -> None:
        """The apply pipeline takes paths and timeouts from settings."""
        settings = Settings(
            data_dir=tmp_path,
            hosts_path=tmp_path / "hosts",
            tmp_dir=tmp_path / "tmp",
            safe_mode=True,
            elevation_timeout=9,
        )
        ws = open_workspace(settings)
        assert ws.pipeline.hosts_path == str(tmp_path / "hosts")
        assert ws.pipeline.sandbox is True
        assert ws.pipeline.tmp_dir == tmp_path / "tmp"
        assert isinstance(ws.pipeline.installer, SudoInstaller)
        assert ws.pipeline.installer.timeout == 9
