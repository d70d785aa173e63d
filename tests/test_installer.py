"""Tests for the privileged installer.

Uses mocked subprocess; sudo is never invoked.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from sweethosts.system.installer import (
    COPY_SCRIPT,
    SECRET_MASK,
    InstallerError,
    SudoInstaller,
    mask_secret,
)

SECRET = "s3cr3t-pw"


class TestMaskSecret:
    """Test mask_secret."""

    def test_masks_every_occurrence(self) -> None:
        """Every occurrence of the secret is replaced."""
        assert mask_secret(f"a {SECRET} b {SECRET}", SECRET) == (
            f"a {SECRET_MASK} b {SECRET_MASK}"
        )

    def test_empty_secret(self) -> None:
        """An empty secret leaves the text unchanged."""
        assert mask_secret("text", "") == "text"


class TestSudoInstaller:
    """Test SudoInstaller."""

    def test_command_has_no_secret(self) -> None:
        """The command line passes paths as arguments and no password."""
        cmd = SudoInstaller().command("/tmp/swh_1.txt", "/etc/hosts")
        assert cmd == [
            "sudo",
            "-S",
            "-p",
            "",
            "sh",
            "-c",
            COPY_SCRIPT,
            "sh",
            "/tmp/swh_1.txt",
            "/etc/hosts",
        ]

    def test_install_feeds_secret_on_stdin(self) -> None:
        """The password is passed on stdin only."""
        mock_result = MagicMock(returncode=0, stdout="", stderr="")
        with patch("subprocess.run", return_value=mock_result) as mock_run:
            SudoInstaller(timeout=7).install("/tmp/src", "/etc/hosts", SECRET)

        args, kwargs = mock_run.call_args
        assert SECRET not in " ".join(args[0])
        assert kwargs["input"] == f"{SECRET}\n"
        assert kwargs["timeout"] == 7
        assert kwargs["check"] is False

    def test_install_failure_masks_secret(self) -> None:
        """A failed install raises with the secret masked out of stderr."""
        mock_result = MagicMock(
            returncode=1, stdout="", stderr=f"Sorry, {SECRET} is wrong\n"
        )
        with patch("subprocess.run", return_value=mock_result):
            with pytest.raises(InstallerError) as exc_info:
                SudoInstaller().install("/tmp/src", "/etc/hosts", SECRET)

        assert SECRET not in exc_info.value.message
        assert SECRET_MASK in exc_info.value.message
        assert exc_info.value.error_code == "no_access"

    def test_install_failure_without_stderr(self) -> None:
        """A silent failure reports the exit code."""
        mock_result = MagicMock(returncode=3, stdout="", stderr="")
        with patch("subprocess.run", return_value=mock_result):
            with pytest.raises(InstallerError, match="exited with code 3"):
                SudoInstaller().install("/tmp/src", "/etc/hosts", SECRET)

    def test_install_timeout(self) -> None:
        """A timeout raises with the elevation_timeout code."""
        with patch(
            "subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="sudo", timeout=1),
        ):
            with pytest.raises(InstallerError) as exc_info:
                SudoInstaller(timeout=1).install("/tmp/src", "/etc/hosts", SECRET)
        assert exc_info.value.error_code == "elevation_timeout"

    def test_missing_sudo(self) -> None:
        """A missing sudo binary is an installer error."""
        with patch("subprocess.run", side_effect=FileNotFoundError("sudo")):
            with pytest.raises(InstallerError) as exc_info:
                SudoInstaller().install("/tmp/src", "/etc/hosts", SECRET)
        assert exc_info.value.error_code == "no_access"
