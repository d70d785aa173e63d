"""Tests for shared types module."""

from sweethosts.types import ApplyOutcome, ApplyStatus, NodeKind, WriteMode


class TestEnums:
    """Test enum definitions."""

    def test_node_kind_values(self) -> None:
        """NodeKind should have expected values."""
        assert NodeKind.LOCAL.value == "local"
        assert NodeKind.REMOTE.value == "remote"
        assert NodeKind.GROUP.value == "group"
        assert NodeKind.FOLDER.value == "folder"

    def test_apply_status_values(self) -> None:
        """ApplyStatus should have expected values."""
        assert ApplyStatus.INSTALLED.value == "installed"
        assert ApplyStatus.INSTALLED_SANDBOXED.value == "installed_sandboxed"
        assert ApplyStatus.PERMISSION_DENIED.value == "permission_denied"
        assert ApplyStatus.IO_FAILURE.value == "io_failure"

    def test_write_mode_values(self) -> None:
        """WriteMode should have expected values."""
        assert WriteMode("append") is WriteMode.APPEND
        assert WriteMode("overwrite") is WriteMode.OVERWRITE


class TestApplyOutcome:
    """Test ApplyOutcome."""

    def test_success_statuses(self) -> None:
        """Only installed statuses count as success."""
        assert ApplyOutcome(status=ApplyStatus.INSTALLED).success
        assert ApplyOutcome(status=ApplyStatus.INSTALLED_SANDBOXED).success
        assert not ApplyOutcome(status=ApplyStatus.PERMISSION_DENIED).success
        assert not ApplyOutcome(status=ApplyStatus.IO_FAILURE).success

    def test_to_dict_omits_contents(self) -> None:
        """The JSON form carries status fields but not file contents."""
        outcome = ApplyOutcome(
            status=ApplyStatus.PERMISSION_DENIED,
            code="no_access",
            old_content="a",
            new_content="b",
        )
        assert outcome.to_dict() == {
            "success": False,
            "status": "permission_denied",
            "sandbox_path": None,
            "message": None,
            "code": "no_access",
        }
