"""
Tests for the Entry entity.
"""

from datetime import datetime

import pytest

from webterm.entities.entry import Entry, EntryKind, extension_of


class TestExtensionOf:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("notes.txt", "txt"),
            ("archive.tar.gz", "gz"),
            ("Makefile", None),
            (".profile", None),
            ("trailing.", None),
        ],
    )
    def test_extension_of(self, name, expected):
        assert extension_of(name) == expected


class TestEntry:
    """Test cases for the Entry entity."""

    def test_file_derives_extension(self):
        entry = Entry(name="plan.md", kind=EntryKind.FILE, path="/plan.md", size=12)

        assert entry.extension == "md"
        assert not entry.is_dir
        assert not entry.is_hidden

    def test_directory_has_no_extension(self):
        entry = Entry(name="v1.0", kind=EntryKind.DIRECTORY, path="/v1.0")

        assert entry.extension is None
        assert entry.is_dir

    def test_explicit_extension_is_kept(self):
        entry = Entry(name="data", kind=EntryKind.FILE, path="/data", extension="csv")

        assert entry.extension == "csv"

    def test_hidden(self):
        assert Entry(name=".env", kind=EntryKind.FILE, path="/.env").is_hidden

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="non-empty"):
            Entry(name="", kind=EntryKind.FILE, path="/")

    def test_get_details(self):
        modified = datetime(2025, 8, 1, 12, 30)
        entry = Entry(
            name="a.txt",
            kind=EntryKind.FILE,
            path="/docs/a.txt",
            size=5,
            modified_at=modified,
            id="42",
        )

        details = entry.get_details()

        assert details == {
            "id": "42",
            "path": "/docs/a.txt",
            "name": "a.txt",
            "kind": "file",
            "size": 5,
            "extension": "txt",
            "created_at": None,
            "modified_at": "2025-08-01T12:30:00",
        }

    def test_str(self):
        entry = Entry(name="docs", kind=EntryKind.DIRECTORY, path="/docs")

        assert str(entry) == "Entry(name='docs', kind=directory, size=0)"
