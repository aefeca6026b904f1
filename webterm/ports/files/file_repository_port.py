"""
File repository port interface defining the contract with the storage backend.
"""

from abc import ABC, abstractmethod

from webterm.entities.entry import Entry


class FileRepositoryPort(ABC):
    """Port interface for virtual filesystem operations.

    Every path is an absolute virtual path ("/" is the root). Implementations
    are bound to one caller identity and forward it on every call.
    """

    @abstractmethod
    async def list_entries(self, path: str) -> list[Entry]:
        """
        List the entries of a directory.

        Args:
            path: Absolute virtual path of the directory

        Returns:
            List of Entry entities, in backend order

        Raises:
            EntryNotFoundError: If the path is not an existing directory
            FileRepositoryError: If listing fails
        """
        pass

    @abstractmethod
    async def read_text(self, path: str) -> str:
        """
        Read a file as text.

        Args:
            path: Absolute virtual path of the file

        Returns:
            The file content

        Raises:
            EntryNotFoundError: If the file does not exist
            NotATextFileError: If the content is not text
        """
        pass

    @abstractmethod
    async def write_new_file(self, parent_path: str, name: str, content: str = "") -> None:
        """
        Create a new text file.

        Args:
            parent_path: Absolute virtual path of the parent directory
            name: File name
            content: Initial text content

        Raises:
            EntryExistsError: If an entry with this name already exists
            EntryNotFoundError: If the parent directory does not exist
        """
        pass

    @abstractmethod
    async def create_directory(self, parent_path: str, name: str) -> None:
        """
        Create a directory.

        Raises:
            EntryExistsError: If an entry with this name already exists
            EntryNotFoundError: If the parent directory does not exist
        """
        pass

    @abstractmethod
    async def delete_entry(self, path: str, is_directory: bool = False) -> None:
        """
        Delete a file or a directory (with its content).

        Raises:
            EntryNotFoundError: If the entry does not exist
        """
        pass

    @abstractmethod
    async def rename_entry(
        self, path: str, new_name: str, is_directory: bool = False
    ) -> None:
        """
        Rename an entry inside its parent directory.

        Raises:
            EntryNotFoundError: If the entry does not exist
            EntryExistsError: If the new name is already taken
        """
        pass

    async def aclose(self) -> None:
        """Release adapter resources (network clients)."""
        return None
