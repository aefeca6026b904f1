"""
Pytest configuration and shared fixtures.
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

import pytest

from webterm.adapters.files.local_fs_adapter import LocalFileSystemAdapter
from webterm.config.settings import Settings
from webterm.container import DependencyContainer
from webterm.entities.entry import Entry, EntryKind
from webterm.ports.files.file_repository_port import FileRepositoryPort


@pytest.fixture
def temp_directory():
    """
    Create a temporary directory holding a small virtual tree.

    Layout:
        /readme.txt
        /notes.md
        /.hidden
        /docs/guide.txt
        /docs/empty/

    Returns:
        Path to the temporary directory
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        with open(os.path.join(temp_dir, "readme.txt"), "w") as f:
            f.write("Hello\nTODO: write docs\nBye\n")

        with open(os.path.join(temp_dir, "notes.md"), "w") as f:
            f.write("# Notes\n")

        with open(os.path.join(temp_dir, ".hidden"), "w") as f:
            f.write("secret")

        docs = os.path.join(temp_dir, "docs")
        os.makedirs(os.path.join(docs, "empty"))
        with open(os.path.join(docs, "guide.txt"), "w") as f:
            f.write("step one\nstep two\n")

        yield temp_dir


@pytest.fixture
def mock_logger():
    """
    Create a mock logger for testing.

    Returns:
        Mock logger instance
    """
    return MagicMock()


@pytest.fixture
def local_adapter(temp_directory, mock_logger):
    """Local storage adapter rooted at the temporary tree."""
    return LocalFileSystemAdapter(temp_directory, "alice", logger=mock_logger)


@pytest.fixture
def mock_repository():
    """
    Create a mocked storage port.

    Returns:
        AsyncMock constrained to the FileRepositoryPort interface
    """
    return AsyncMock(spec=FileRepositoryPort)


@pytest.fixture
def make_entry():
    """Factory building Entry entities for mocked listings."""

    def _make(name: str, is_dir: bool = False, size: int = 0, parent: str = "/") -> Entry:
        return Entry(
            name=name,
            kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
            path=f"/{name}" if parent == "/" else f"{parent}/{name}",
            size=size,
        )

    return _make


@pytest.fixture
def local_settings(temp_directory):
    """Settings pointing the container at the local backend."""
    cfg = Settings()
    cfg.backend = "local"
    cfg.local_root = temp_directory
    cfg.user = "alice"
    cfg.history_limit = 1000
    cfg.max_script_depth = 8
    cfg.default_extension = ".txt"
    cfg.script_extension = ".sh"
    return cfg


@pytest.fixture
def dependency_container(local_settings, mock_logger):
    """
    Create a dependency container over the local backend for testing.

    Returns:
        DependencyContainer instance with mocked logger
    """
    container = DependencyContainer(local_settings)
    # Replace the logger with our mock
    container._logger = mock_logger
    return container


@pytest.fixture
def session(dependency_container):
    """A fresh shell session at the root of the temporary tree."""
    return dependency_container.create_session()
