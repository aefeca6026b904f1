"""
Helpers shared by the command groups.
"""

from datetime import datetime
from typing import Iterable, Optional

from webterm.entities.entry import Entry
from webterm.exceptions import ArgumentError, NotFoundError
from webterm.ports.files.file_repository_port import FileRepositoryPort


def sort_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Directories first, then by name."""
    return sorted(entries, key=lambda e: (not e.is_dir, e.name))


def index_by_name(entries: Iterable[Entry]) -> dict[str, Entry]:
    return {e.name: e for e in entries}


async def find_entry(repository: FileRepositoryPort, directory: str, name: str) -> Entry:
    """Look up a named entry in the listing of a directory.

    Raises:
        NotFoundError: If no entry has this name
    """
    for entry in await repository.list_entries(directory):
        if entry.name == name:
            return entry
    raise NotFoundError(f"'{name}' not found in {directory}")


def validate_name(command: str, name: str) -> str:
    if "/" in name or name in (".", ".."):
        raise ArgumentError(f"{command}: invalid name '{name}'")
    return name


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KB", "MB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


def format_timestamp(value: Optional[str]) -> str:
    """Format an ISO timestamp from Entry.get_details(); None is "unknown"."""
    if not value:
        return "unknown"
    return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M:%S")
