"""
Tests for the LocalFileSystemAdapter.
"""

import os
import threading
from unittest.mock import patch

import pytest

from webterm.adapters.files.local_fs_adapter import LocalFileSystemAdapter
from webterm.entities.entry import EntryKind
from webterm.exceptions import (
    EntryExistsError,
    EntryNotFoundError,
    FileRepositoryError,
    NotATextFileError,
)


class TestLocalFileSystemAdapter:
    """Test cases for the LocalFileSystemAdapter."""

    def test_root_must_exist(self, temp_directory, mock_logger):
        with pytest.raises(FileRepositoryError, match="not a directory"):
            LocalFileSystemAdapter(os.path.join(temp_directory, "missing"), logger=mock_logger)

    @pytest.mark.asyncio
    async def test_list_root(self, local_adapter):
        entries = {e.name: e for e in await local_adapter.list_entries("/")}

        assert set(entries) == {"readme.txt", "notes.md", ".hidden", "docs"}
        assert entries["docs"].kind is EntryKind.DIRECTORY
        assert entries["docs"].path == "/docs"
        assert entries["readme.txt"].size == len("Hello\nTODO: write docs\nBye\n")
        assert entries["readme.txt"].extension == "txt"
        assert entries["readme.txt"].modified_at is not None

    @pytest.mark.asyncio
    async def test_list_nested(self, local_adapter):
        entries = await local_adapter.list_entries("/docs")

        assert sorted(e.path for e in entries) == ["/docs/empty", "/docs/guide.txt"]

    @pytest.mark.asyncio
    async def test_list_missing_directory(self, local_adapter):
        with pytest.raises(EntryNotFoundError):
            await local_adapter.list_entries("/nope")

    @pytest.mark.asyncio
    async def test_list_file_is_not_a_directory(self, local_adapter):
        with pytest.raises(EntryNotFoundError, match="not a directory"):
            await local_adapter.list_entries("/readme.txt")

    @pytest.mark.asyncio
    async def test_path_cannot_escape_root(self, local_adapter):
        with pytest.raises(FileRepositoryError, match="escapes"):
            await local_adapter.list_entries("/../..")

    @pytest.mark.asyncio
    async def test_read_text(self, local_adapter):
        assert await local_adapter.read_text("/docs/guide.txt") == "step one\nstep two\n"

    @pytest.mark.asyncio
    async def test_read_binary(self, local_adapter, temp_directory):
        with open(os.path.join(temp_directory, "blob.bin"), "wb") as f:
            f.write(b"\xff\xfe\x00\x81")

        with pytest.raises(NotATextFileError):
            await local_adapter.read_text("/blob.bin")

    @pytest.mark.asyncio
    async def test_read_missing(self, local_adapter):
        with pytest.raises(EntryNotFoundError):
            await local_adapter.read_text("/docs")

    @pytest.mark.asyncio
    async def test_write_new_file(self, local_adapter, temp_directory, mock_logger):
        await local_adapter.write_new_file("/docs", "new.txt", "content")

        with open(os.path.join(temp_directory, "docs", "new.txt")) as f:
            assert f.read() == "content"
        mock_logger.info.assert_called_with("Created file /docs/new.txt for alice")

    @pytest.mark.asyncio
    async def test_write_refuses_existing(self, local_adapter, temp_directory):
        with pytest.raises(EntryExistsError):
            await local_adapter.write_new_file("/", "readme.txt", "x")

        with open(os.path.join(temp_directory, "readme.txt")) as f:
            assert f.read().startswith("Hello")

    @pytest.mark.asyncio
    async def test_write_into_missing_parent(self, local_adapter):
        with pytest.raises(EntryNotFoundError):
            await local_adapter.write_new_file("/nope", "a.txt")

    @pytest.mark.asyncio
    async def test_invalid_names(self, local_adapter):
        for name in ("", "a/b", "..", "."):
            with pytest.raises(FileRepositoryError, match="Invalid entry name"):
                await local_adapter.create_directory("/", name)

    @pytest.mark.asyncio
    async def test_create_directory(self, local_adapter, temp_directory):
        await local_adapter.create_directory("/docs", "sub")

        assert os.path.isdir(os.path.join(temp_directory, "docs", "sub"))
        with pytest.raises(EntryExistsError):
            await local_adapter.create_directory("/docs", "sub")

    @pytest.mark.asyncio
    async def test_delete_file(self, local_adapter, temp_directory):
        await local_adapter.delete_entry("/notes.md")

        assert not os.path.exists(os.path.join(temp_directory, "notes.md"))

    @pytest.mark.asyncio
    async def test_delete_directory_recursively(self, local_adapter, temp_directory):
        await local_adapter.delete_entry("/docs", is_directory=True)

        assert not os.path.exists(os.path.join(temp_directory, "docs"))

    @pytest.mark.asyncio
    async def test_delete_kind_mismatch(self, local_adapter):
        with pytest.raises(EntryNotFoundError):
            await local_adapter.delete_entry("/docs")
        with pytest.raises(EntryNotFoundError):
            await local_adapter.delete_entry("/readme.txt", is_directory=True)

    @pytest.mark.asyncio
    async def test_delete_root_refused(self, local_adapter):
        with pytest.raises(FileRepositoryError, match="root"):
            await local_adapter.delete_entry("/", is_directory=True)

    @pytest.mark.asyncio
    async def test_rename(self, local_adapter, temp_directory):
        await local_adapter.rename_entry("/docs", "manuals", is_directory=True)

        assert os.path.isdir(os.path.join(temp_directory, "manuals"))
        assert not os.path.exists(os.path.join(temp_directory, "docs"))

    @pytest.mark.asyncio
    async def test_rename_collision(self, local_adapter):
        with pytest.raises(EntryExistsError):
            await local_adapter.rename_entry("/notes.md", "readme.txt")

    @pytest.mark.asyncio
    async def test_disk_access_runs_in_worker_thread(self, local_adapter):
        loop_thread = threading.get_ident()
        seen = []

        def record(*args):
            seen.append(threading.get_ident())
            return []

        with patch.object(local_adapter, "_list_entries", side_effect=record), patch.object(
            local_adapter, "_delete_entry", side_effect=record
        ):
            await local_adapter.list_entries("/")
            await local_adapter.delete_entry("/docs", is_directory=True)

        assert len(seen) == 2
        assert loop_thread not in seen
