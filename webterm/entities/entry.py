"""
Entry domain entity.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


def extension_of(name: str) -> Optional[str]:
    """Return the extension of a file name without the dot, or None.

    Dot-files such as ``.profile`` have no extension.
    """
    dot = name.rfind(".")
    if dot <= 0 or dot == len(name) - 1:
        return None
    return name[dot + 1 :]


@dataclass(frozen=True)
class Entry:
    """
    Virtual filesystem entry (file or directory) as reported by the storage backend.
    """

    name: str
    kind: EntryKind
    path: str
    size: int = 0
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    extension: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ValueError("Entry name must be a non-empty string")
        if self.extension is None and self.kind is EntryKind.FILE:
            # frozen dataclass: bypass __setattr__ for the derived field
            object.__setattr__(self, "extension", extension_of(self.name))

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".")

    def get_details(self) -> dict[str, Any]:
        """
        Get comprehensive entry details.

        Returns:
            Dictionary with entry information
        """
        return {
            "id": self.id,
            "path": self.path,
            "name": self.name,
            "kind": self.kind.value,
            "size": self.size,
            "extension": self.extension,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "modified_at": self.modified_at.isoformat() if self.modified_at else None,
        }

    def __str__(self) -> str:
        return f"Entry(name='{self.name}', kind={self.kind.value}, size={self.size})"
