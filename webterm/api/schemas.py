"""
Pydantic models for API requests and responses.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from webterm.entities.command import HistoryEntry


class CreateSessionRequest(BaseModel):
    """Schema for opening a terminal session."""

    user: Optional[str] = Field(None, description="Caller identity (default from config)")
    working_path: str = Field("/", description="Initial working directory")


class SessionInfo(BaseModel):
    """Schema describing a terminal session."""

    session_id: str = Field(..., description="Session identifier")
    user: str = Field(..., description="Caller identity")
    working_path: str = Field(..., description="Current working directory")
    state: str = Field(..., description="idle or processing")
    history_length: int = Field(..., description="Number of history entries")


class CommandRequest(BaseModel):
    """Schema for submitting one command line."""

    command: str = Field(..., description="Raw command line, e.g. 'ls -l'")


class HistoryEntryInfo(BaseModel):
    """Schema for one executed command."""

    command: str = Field(..., description="Command as submitted")
    output: List[str] = Field(default_factory=list, description="Output lines")
    succeeded: bool = Field(..., description="Whether the command succeeded")
    executed_at: datetime = Field(..., description="Completion time")

    @classmethod
    def from_entity(cls, entry: HistoryEntry):
        """Create a HistoryEntryInfo schema from a HistoryEntry."""
        return cls(
            command=entry.command,
            output=list(entry.output),
            succeeded=entry.succeeded,
            executed_at=entry.executed_at,
        )


class CommandResponse(HistoryEntryInfo):
    """Schema for a command result, with the working directory after it ran."""

    working_path: str = Field(..., description="Working directory after the command")


class HistoryResponse(BaseModel):
    """Schema for the session history."""

    entries: List[HistoryEntryInfo] = Field(..., description="History, oldest first")


class RecallDirection(str, Enum):
    older = "older"
    newer = "newer"


class RecallRequest(BaseModel):
    """Schema for history recall navigation."""

    direction: RecallDirection = Field(..., description="older (up) or newer (down)")


class RecallResponse(BaseModel):
    """Schema for the pending input after recall."""

    buffer: str = Field(..., description="Pending input line")
    cursor: int = Field(..., description="Recall cursor (-1 when nothing is selected)")


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str = Field(..., description="Error message")
