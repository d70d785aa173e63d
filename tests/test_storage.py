"""Tests for the JSON document storage helpers."""

import json
from pathlib import Path

from sweethosts.storage import (
    LOCK_FILENAME,
    JsonDocument,
    data_dir_lock,
    write_documents,
)


class TestJsonDocument:
    """Test JsonDocument reads and writes."""

    def test_missing_file_reads_default(self, tmp_path: Path) -> None:
        """A missing file should read as an empty list."""
        assert JsonDocument(tmp_path / "missing.json").read() == []

    def test_missing_file_reads_dict_default(self, tmp_path: Path) -> None:
        """A dict document should default to an empty dict."""
        doc = JsonDocument(tmp_path / "missing.json", default_factory=dict)
        assert doc.read() == {}

    def test_corrupt_file_reads_default(self, tmp_path: Path) -> None:
        """Malformed JSON should read as the default."""
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonDocument(path).read() == []

    def test_wrong_type_reads_default(self, tmp_path: Path) -> None:
        """A document of the wrong top-level type should read as the default."""
        path = tmp_path / "obj.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        assert JsonDocument(path).read() == []

    def test_write_then_read(self, tmp_path: Path) -> None:
        """Written values should read back unchanged."""
        doc = JsonDocument(tmp_path / "doc.json")
        assert doc.write([{"id": "1", "title": "héllo"}]) is True
        assert doc.read() == [{"id": "1", "title": "héllo"}]

    def test_write_creates_parent_dir(self, tmp_path: Path) -> None:
        """Writing should create a missing data directory."""
        doc = JsonDocument(tmp_path / "nested" / "doc.json")
        assert doc.write([]) is True
        assert (tmp_path / "nested" / "doc.json").exists()


class TestWriteDocuments:
    """Test paired staged writes."""

    def test_writes_all_documents(self, tmp_path: Path) -> None:
        """Every document of a batch should be written."""
        a = JsonDocument(tmp_path / "a.json")
        b = JsonDocument(tmp_path / "b.json")
        assert write_documents([(a, [1]), (b, [2])]) is True
        assert a.read() == [1]
        assert b.read() == [2]

    def test_failed_stage_leaves_targets_untouched(self, tmp_path: Path) -> None:
        """If one value cannot be serialized, no target should change."""
        a = JsonDocument(tmp_path / "a.json")
        b = JsonDocument(tmp_path / "b.json")
        a.write(["old-a"])
        b.write(["old-b"])

        assert write_documents([(a, ["new-a"]), (b, [object()])]) is False

        assert a.read() == ["old-a"]
        assert b.read() == ["old-b"]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.json", "b.json"]

    def test_written_file_is_plain_json(self, tmp_path: Path) -> None:
        """Targets should contain plain JSON readable without the helpers."""
        a = JsonDocument(tmp_path / "a.json")
        write_documents([(a, {"k": "v"})])
        assert json.loads((tmp_path / "a.json").read_text(encoding="utf-8")) == {
            "k": "v"
        }


class TestDataDirLock:
    """Test data directory locking."""

    def test_lock_creates_lock_file(self, tmp_path: Path) -> None:
        """Taking the lock should create the lock file."""
        with data_dir_lock(tmp_path):
            assert (tmp_path / LOCK_FILENAME).exists()

    def test_lock_is_reacquirable(self, tmp_path: Path) -> None:
        """The lock should be released on exit."""
        with data_dir_lock(tmp_path):
            pass
        with data_dir_lock(tmp_path):
            pass
