"""
Local file system adapter storing the virtual tree under a root directory.
"""

import asyncio
import logging
import os
import shutil
from datetime import datetime

from typing_extensions import override

from webterm.entities.entry import Entry, EntryKind
from webterm.exceptions import (
    EntryExistsError,
    EntryNotFoundError,
    FileRepositoryError,
    NotATextFileError,
)
from webterm.ports.files.file_repository_port import FileRepositoryPort
from webterm.utils.workspace import normalize_root, to_local_path


def _join_virtual(parent: str, name: str) -> str:
    return f"/{name}" if parent == "/" else f"{parent}/{name}"


class LocalFileSystemAdapter(FileRepositoryPort):
    """Local file system implementation of the file repository port."""

    def __init__(self, root: str, user: str = "user", logger: logging.Logger | None = None):
        """
        Initialize the adapter.

        Args:
            root: Directory holding the virtual tree; "/" maps onto it
            user: Caller identity (recorded in logs only)
            logger: Logger instance to use for logging. If None, a default logger will be created.
        """
        self._root = normalize_root(root)
        self._user = user
        self._logger: logging.Logger = logger or logging.getLogger(__name__)
        if not os.path.isdir(self._root):
            raise FileRepositoryError(f"Storage root is not a directory: {self._root}")

    @property
    def root(self) -> str:
        return self._root

    def _local(self, virtual_path: str) -> str:
        try:
            return to_local_path(self._root, virtual_path)
        except ValueError as e:
            raise FileRepositoryError(str(e))

    def _validate_directory(self, virtual_path: str) -> str:
        """
        Validate that a virtual path exists and is a directory.

        Returns:
            The local path of the directory

        Raises:
            EntryNotFoundError: If directory does not exist or is not a directory
        """
        local = self._local(virtual_path)
        if not os.path.exists(local):
            raise EntryNotFoundError(f"Directory does not exist: {virtual_path}")
        if not os.path.isdir(local):
            raise EntryNotFoundError(f"Path is not a directory: {virtual_path}")
        return local

    def _validate_name(self, name: str) -> None:
        if not name or "/" in name or name in (".", ".."):
            raise FileRepositoryError(f"Invalid entry name: {name!r}")

    def _create_entry(self, parent: str, name: str, local: str) -> Entry:
        st = os.stat(local)
        is_dir = os.path.isdir(local)
        return Entry(
            name=name,
            kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
            path=_join_virtual(parent, name),
            size=0 if is_dir else st.st_size,
            created_at=datetime.fromtimestamp(st.st_ctime),
            modified_at=datetime.fromtimestamp(st.st_mtime),
            id=str(st.st_ino),
        )

    @override
    async def list_entries(self, path: str) -> list[Entry]:
        return await asyncio.to_thread(self._list_entries, path)

    def _list_entries(self, path: str) -> list[Entry]:
        try:
            local_dir = self._validate_directory(path)
            entries: list[Entry] = []
            for item in os.listdir(local_dir):
                try:
                    entries.append(self._create_entry(path, item, os.path.join(local_dir, item)))
                except OSError as e:
                    # Log the error but continue with other entries
                    self._logger.warning(f"Could not process entry {item}: {e}")
                    continue
            return entries
        except FileRepositoryError:
            raise
        except Exception as e:
            raise FileRepositoryError(f"Failed to list entries in {path}: {str(e)}")

    @override
    async def read_text(self, path: str) -> str:
        return await asyncio.to_thread(self._read_text, path)

    def _read_text(self, path: str) -> str:
        local = self._local(path)
        if not os.path.isfile(local):
            raise EntryNotFoundError(f"File does not exist: {path}")
        try:
            with open(local, "r", encoding="utf-8") as f:
                return f.read()
        except UnicodeDecodeError:
            raise NotATextFileError(f"Not a text file: {path}")
        except Exception as e:
            raise FileRepositoryError(f"Failed to read {path}: {str(e)}")

    @override
    async def write_new_file(self, parent_path: str, name: str, content: str = "") -> None:
        await asyncio.to_thread(self._write_new_file, parent_path, name, content)

    def _write_new_file(self, parent_path: str, name: str, content: str) -> None:
        self._validate_name(name)
        local_dir = self._validate_directory(parent_path)
        target = os.path.join(local_dir, name)
        try:
            # "x" mode refuses to clobber an existing file
            with open(target, "x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError:
            raise EntryExistsError(f"Entry already exists: {_join_virtual(parent_path, name)}")
        except IsADirectoryError:
            raise EntryExistsError(f"Entry already exists: {_join_virtual(parent_path, name)}")
        except Exception as e:
            raise FileRepositoryError(f"Failed to create file {name}: {str(e)}")
        self._logger.info(f"Created file {_join_virtual(parent_path, name)} for {self._user}")

    @override
    async def create_directory(self, parent_path: str, name: str) -> None:
        await asyncio.to_thread(self._create_directory, parent_path, name)

    def _create_directory(self, parent_path: str, name: str) -> None:
        self._validate_name(name)
        local_dir = self._validate_directory(parent_path)
        try:
            os.mkdir(os.path.join(local_dir, name))
        except FileExistsError:
            raise EntryExistsError(f"Entry already exists: {_join_virtual(parent_path, name)}")
        except Exception as e:
            raise FileRepositoryError(f"Failed to create directory {name}: {str(e)}")
        self._logger.info(f"Created directory {_join_virtual(parent_path, name)} for {self._user}")

    @override
    async def delete_entry(self, path: str, is_directory: bool = False) -> None:
        await asyncio.to_thread(self._delete_entry, path, is_directory)

    def _delete_entry(self, path: str, is_directory: bool) -> None:
        if path == "/":
            raise FileRepositoryError("Cannot delete the root directory")
        local = self._local(path)
        if not os.path.exists(local) or os.path.isdir(local) != is_directory:
            raise EntryNotFoundError(f"Entry does not exist: {path}")
        try:
            if is_directory:
                shutil.rmtree(local)
            else:
                os.remove(local)
        except Exception as e:
            raise FileRepositoryError(f"Failed to delete {path}: {str(e)}")

    @override
    async def rename_entry(self, path: str, new_name: str, is_directory: bool = False) -> None:
        await asyncio.to_thread(self._rename_entry, path, new_name, is_directory)

    def _rename_entry(self, path: str, new_name: str, is_directory: bool) -> None:
        self._validate_name(new_name)
        local = self._local(path)
        if not os.path.exists(local) or os.path.isdir(local) != is_directory:
            raise EntryNotFoundError(f"Entry does not exist: {path}")
        target = os.path.join(os.path.dirname(local), new_name)
        if os.path.exists(target):
            raise EntryExistsError(f"An entry named '{new_name}' already exists")
        try:
            os.rename(local, target)
        except Exception as e:
            raise FileRepositoryError(f"Failed to rename {path}: {str(e)}")
