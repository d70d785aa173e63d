"""Tests for the CLI.

Every test points the CLI at a data directory and hosts file under
tmp_path through SWEETHOSTS_* environment variables.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from sweethosts import __version__
from sweethosts.cli import app
from sweethosts.system.hosts import CONTENT_START

runner = CliRunner()


@pytest.fixture
def env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at a temporary data directory and hosts file."""
    hosts = tmp_path / "hosts"
    hosts.write_text("127.0.0.1 localhost\n", encoding="utf-8")
    monkeypatch.setenv("SWEETHOSTS_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("SWEETHOSTS_HOSTS_PATH", str(hosts))
    monkeypatch.setenv("SWEETHOSTS_TMP_DIR", str(tmp_path / "tmp"))
    monkeypatch.setenv("SWEETHOSTS_LOG_LEVEL", "ERROR")
    monkeypatch.delenv("SWEETHOSTS_SAFE_MODE", raising=False)
    return tmp_path


def _add(title: str, node_id: str, *extra: str) -> None:
    result = runner.invoke(app, ["add", title, "--id", node_id, *extra])
    assert result.exit_code == 0, result.output


class TestCLIHelp:
    """Test CLI help and version commands."""

    def test_help_returns_zero(self) -> None:
        """CLI --help should return exit code 0."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "SweetHosts" in result.stdout

    def test_version_flag(self) -> None:
        """CLI --version should print version and exit 0."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_short_version_flag(self) -> None:
        """CLI -V should print version and exit 0."""
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestCLIConfig:
    """Test CLI config command."""

    def test_config_command(self, env: Path) -> None:
        """CLI config should show configuration."""
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Data directory" in result.stdout

    def test_config_json(self, env: Path) -> None:
        """CLI config --json should output valid JSON."""
        result = runner.invoke(app, ["config", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["data_dir"] == str(env / "data")
        assert data["safe_mode"] is False

    def test_data_dir_flag_overrides_env(self, env: Path) -> None:
        """--data-dir should take precedence over the environment."""
        result = runner.invoke(
            app, ["--data-dir", str(env / "other"), "config", "--json"]
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data_dir"] == str(env / "other")


class TestCLIProfiles:
    """Test profile commands."""

    def test_list_empty_json(self, env: Path) -> None:
        """An empty data directory lists no profiles."""
        result = runner.invoke(app, ["list", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == []

    def test_add_and_list(self, env: Path) -> None:
        """Added profiles appear in the list."""
        _add("Work", "work", "--on")
        _add("Group", "grp", "--folder")

        result = runner.invoke(app, ["list", "--json"])
        data = json.loads(result.stdout)
        assert [n["id"] for n in data] == ["work", "grp"]
        assert data[0]["on"] is True
        assert data[1]["type"] == "folder"

        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "Work" in result.stdout

    def test_add_duplicate(self, env: Path) -> None:
        """Adding an existing id fails."""
        _add("Work", "work")
        result = runner.invoke(app, ["add", "Again", "--id", "work"])
        assert result.exit_code == 1

    def test_add_with_content_and_show(self, env: Path) -> None:
        """Content files are stored and shown verbatim."""
        content = env / "work.hosts"
        content.write_text("10.0.0.1 intranet\n", encoding="utf-8")
        _add("Work", "work", "--content-file", str(content))

        result = runner.invoke(app, ["show", "work"])
        assert result.exit_code == 0
        assert result.stdout == "10.0.0.1 intranet\n"

    def test_show_missing(self, env: Path) -> None:
        """Showing a profile without content fails."""
        result = runner.invoke(app, ["show", "missing"])
        assert result.exit_code == 1

    def test_toggle(self, env: Path) -> None:
        """Toggling flips the activation flag."""
        _add("Work", "work")
        result = runner.invoke(app, ["toggle", "work"])
        assert result.exit_code == 0
        data = json.loads(runner.invoke(app, ["list", "--json"]).stdout)
        assert data[0]["on"] is True

    def test_toggle_missing(self, env: Path) -> None:
        """Toggling an unknown id fails."""
        assert runner.invoke(app, ["toggle", "missing"]).exit_code == 1

    def test_rename(self, env: Path) -> None:
        """Renaming changes the title."""
        _add("Work", "work")
        assert runner.invoke(app, ["rename", "work", "Office"]).exit_code == 0
        data = json.loads(runner.invoke(app, ["list", "--json"]).stdout)
        assert data[0]["title"] == "Office"

    def test_edit_and_compose(self, env: Path) -> None:
        """Edited content of active profiles is composed."""
        _add("Work", "work", "--on")
        content = env / "new.hosts"
        content.write_text("10.0.0.2 wiki", encoding="utf-8")
        assert runner.invoke(app, ["edit", "work", str(content)]).exit_code == 0

        result = runner.invoke(app, ["compose"])
        assert result.exit_code == 0
        assert result.stdout == "# file: work\n10.0.0.2 wiki\n"


class TestCLIApply:
    """Test apply and refresh commands."""

    def test_apply_writes_hosts(self, env: Path) -> None:
        """apply appends the managed block to the hosts file."""
        content = env / "work.hosts"
        content.write_text("10.0.0.1 intranet", encoding="utf-8")
        _add("Work", "work", "--on", "--content-file", str(content))

        result = runner.invoke(app, ["apply", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["status"] == "installed"
        assert data["hook"] is None

        text = (env / "hosts").read_text(encoding="utf-8")
        assert text.startswith("127.0.0.1 localhost")
        assert CONTENT_START in text

        history = json.loads(runner.invoke(app, ["history", "list", "--json"]).stdout)
        assert len(history) == 2

    def test_apply_safe_mode(self, env: Path) -> None:
        """--safe-mode leaves the hosts file alone."""
        result = runner.invoke(app, ["--safe-mode", "apply", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["status"] == "installed_sandboxed"
        assert Path(data["sandbox_path"]).parent == env / "tmp"
        assert (env / "hosts").read_text(encoding="utf-8") == "127.0.0.1 localhost\n"

    def test_apply_raw(self, env: Path) -> None:
        """--raw overwrites the hosts file with the composed profiles."""
        content = env / "work.hosts"
        content.write_text("10.0.0.1 intranet", encoding="utf-8")
        _add("Work", "work", "--on", "--content-file", str(content))

        assert runner.invoke(app, ["apply", "--raw"]).exit_code == 0
        assert (env / "hosts").read_text(encoding="utf-8") == (
            "# file: work\n10.0.0.1 intranet"
        )

    def test_apply_permission_denied(
        self, env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Without access and without a password apply fails."""
        locked = env / "locked"
        locked.mkdir()
        monkeypatch.setenv("SWEETHOSTS_HOSTS_PATH", str(locked))
        result = runner.invoke(app, ["apply", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["status"] == "permission_denied"

    def test_apply_ask_password(
        self, env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """--ask-password retries through sudo with the prompted password."""
        locked = env / "locked"
        locked.mkdir()
        monkeypatch.setenv("SWEETHOSTS_HOSTS_PATH", str(locked))
        mock_result = MagicMock(returncode=0, stdout="", stderr="")
        with patch("subprocess.run", return_value=mock_result) as mock_run:
            result = runner.invoke(app, ["apply", "--ask-password"], input="pw123\n")

        assert result.exit_code == 0, result.output
        args, kwargs = mock_run.call_args
        assert args[0][0] == "sudo"
        assert kwargs["input"] == "pw123\n"
        assert "pw123" not in result.stdout.replace("Password:", "")

    def test_apply_runs_hook(self, env: Path) -> None:
        """The post-apply command runs after a system apply."""
        assert (
            runner.invoke(
                app, ["prefs", "set", "cmd_after_hosts_apply", "flush-dns"]
            ).exit_code
            == 0
        )
        mock_result = MagicMock(returncode=0, stdout="ok", stderr="")
        with patch("subprocess.run", return_value=mock_result) as mock_run:
            result = runner.invoke(app, ["apply", "--json"])

        assert result.exit_code == 0
        assert mock_run.call_args[0][0] == "flush-dns"
        assert json.loads(result.stdout)["hook"]["success"] is True
        records = json.loads(
            runner.invoke(app, ["cmd-history", "list", "--json"]).stdout
        )
        assert len(records) == 1

    def test_apply_no_run_hook(self, env: Path) -> None:
        """--no-run-hook skips the post-apply command."""
        runner.invoke(app, ["prefs", "set", "cmd_after_hosts_apply", "flush-dns"])
        with patch("subprocess.run") as mock_run:
            result = runner.invoke(app, ["apply", "--no-run-hook"])
        assert result.exit_code == 0
        mock_run.assert_not_called()

    def test_refresh(self, env: Path) -> None:
        """refresh writes only the composed profiles."""
        assert runner.invoke(app, ["refresh"]).exit_code == 0
        assert (env / "hosts").read_text(encoding="utf-8") == ""


class TestCLITrash:
    """Test trash commands."""

    def test_move_restore(self, env: Path) -> None:
        """Profiles can be trashed and restored."""
        _add("Work", "work", "--on")
        _add("Home", "home")
        assert runner.invoke(app, ["trash", "move", "work"]).exit_code == 0

        trash = json.loads(runner.invoke(app, ["trash", "list", "--json"]).stdout)
        assert [e["data"]["id"] for e in trash] == ["work"]

        assert runner.invoke(app, ["trash", "restore", "work"]).exit_code == 0
        data = json.loads(runner.invoke(app, ["list", "--json"]).stdout)
        assert [n["id"] for n in data] == ["home", "work"]
        assert data[1]["on"] is False

    def test_move_many_and_clear(self, env: Path) -> None:
        """Several profiles can be trashed and the trash emptied."""
        _add("Work", "work")
        _add("Home", "home")
        assert runner.invoke(app, ["trash", "move", "work", "home"]).exit_code == 0
        assert runner.invoke(app, ["trash", "clear"]).exit_code == 0
        trash = json.loads(runner.invoke(app, ["trash", "list", "--json"]).stdout)
        assert trash == []

    def test_delete_missing(self, env: Path) -> None:
        """Deleting an id that is not in the trash fails."""
        assert runner.invoke(app, ["trash", "delete", "missing"]).exit_code == 1

    def test_restore_missing(self, env: Path) -> None:
        """Restoring an id that is not in the trash fails."""
        assert runner.invoke(app, ["trash", "restore", "missing"]).exit_code == 1


class TestCLIHistory:
    """Test history commands."""

    def test_show_and_delete(self, env: Path) -> None:
        """History entries can be shown and deleted."""
        runner.invoke(app, ["refresh"])
        entries = json.loads(runner.invoke(app, ["history", "list", "--json"]).stdout)
        first = entries[0]["id"]

        result = runner.invoke(app, ["history", "show", first])
        assert result.exit_code == 0
        assert result.stdout == "127.0.0.1 localhost\n"

        assert runner.invoke(app, ["history", "delete", first]).exit_code == 0
        assert runner.invoke(app, ["history", "show", first]).exit_code == 1


class TestCLIPrefs:
    """Test preference commands."""

    def test_set_and_get(self, env: Path) -> None:
        """Values are parsed as JSON when possible."""
        assert runner.invoke(app, ["prefs", "set", "history_limit", "10"]).exit_code == 0
        result = runner.invoke(app, ["prefs", "get", "history_limit"])
        assert json.loads(result.stdout) == 10

        runner.invoke(app, ["prefs", "set", "theme", "dark"])
        prefs = json.loads(runner.invoke(app, ["prefs", "list"]).stdout)
        assert prefs["theme"] == "dark"
        assert prefs["write_mode"] == "append"


class TestCLIExportImport:
    """Test export and import commands."""

    def test_export_import(self, env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A bundle exported from one data directory imports into another."""
        _add("Work", "work")
        bundle = env / "bundle.yaml"
        assert runner.invoke(app, ["export", str(bundle)]).exit_code == 0

        monkeypatch.setenv("SWEETHOSTS_DATA_DIR", str(env / "other"))
        assert runner.invoke(app, ["import", str(bundle)]).exit_code == 0
        data = json.loads(runner.invoke(app, ["list", "--json"]).stdout)
        assert [n["id"] for n in data] == ["work"]

    def test_export_bad_extension(self, env: Path) -> None:
        """Unsupported extensions fail."""
        assert runner.invoke(app, ["export", str(env / "x.txt")]).exit_code == 1

    def test_import_missing(self, env: Path) -> None:
        """Importing a missing file fails."""
        assert runner.invoke(app, ["import", str(env / "x.json")]).exit_code == 1
