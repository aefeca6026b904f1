"""
Shell session: working path, history, recall cursor and the submit loop.
"""

import logging
from enum import Enum
from typing import Optional

from webterm.entities.command import HistoryEntry
from webterm.exceptions import SessionBusyError
from webterm.ports.commands.command_handler_port import CommandContext
from webterm.ports.files.file_repository_port import FileRepositoryPort
from webterm.use_cases.shell.dispatcher import CommandDispatcher
from webterm.use_cases.shell.path_resolver import ROOT

NO_SELECTION = -1


class SessionState(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"


def normalize_working_path(path: str) -> str:
    if not path.startswith("/"):
        raise ValueError(f"Working path must be absolute: {path!r}")
    return "/" + "/".join(p for p in path.split("/") if p)


class ShellSession:
    """One terminal: at most one command or script runs at a time."""

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        user: str,
        working_path: str = ROOT,
        history_limit: Optional[int] = None,
        file_repository: Optional[FileRepositoryPort] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the session.

        Args:
            dispatcher: Command dispatch table bound to this session's storage
            user: Caller identity, echoed by whoami and substituted for $USER
            working_path: Initial working directory
            history_limit: Maximum number of history entries kept (None or 0: unbounded)
            file_repository: Storage adapter owned by the session, closed by aclose()
            logger: Logger instance to use for logging
        """
        self._dispatcher = dispatcher
        self._user = user
        self._working_path = normalize_working_path(working_path)
        self._history_limit = history_limit or None
        self._file_repository = file_repository
        self._logger = logger or logging.getLogger(__name__)
        self._history: list[HistoryEntry] = []
        self._cursor = NO_SELECTION
        self._state = SessionState.IDLE
        self.pending_input = ""

    @property
    def user(self) -> str:
        return self._user

    @property
    def working_path(self) -> str:
        return self._working_path

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def cursor(self) -> int:
        return self._cursor

    async def submit(self, raw_line: str) -> Optional[HistoryEntry]:
        """
        Execute one input line and record it in the history.

        Returns:
            The new history entry, or None for a blank line

        Raises:
            SessionBusyError: If a command is already running
        """
        if self._state is SessionState.PROCESSING:
            raise SessionBusyError("A command is already running in this session")
        command = raw_line.strip()
        if not command:
            return None

        self._state = SessionState.PROCESSING
        try:
            context = CommandContext(
                working_path=self._working_path,
                user=self._user,
                history=tuple(self._history),
            )
            result = await self._dispatcher.execute_line(command, context)

            if result.working_path is not None:
                self._working_path = result.working_path
            if result.clear_history:
                self._history.clear()
            entry = HistoryEntry(
                command=command, output=result.output, succeeded=result.succeeded
            )
            self._append(entry)
            self._cursor = NO_SELECTION
            self.pending_input = ""
            return entry
        finally:
            self._state = SessionState.IDLE

    def _append(self, entry: HistoryEntry) -> None:
        self._history.append(entry)
        if self._history_limit and len(self._history) > self._history_limit:
            del self._history[: len(self._history) - self._history_limit]

    def recall_older(self) -> str:
        """Move the recall cursor one entry back and return the pending input."""
        if self._cursor < len(self._history) - 1:
            self._cursor += 1
            self.pending_input = self._history[-1 - self._cursor].command
        return self.pending_input

    def recall_newer(self) -> str:
        """Move the recall cursor one entry forward and return the pending input."""
        if self._cursor > 0:
            self._cursor -= 1
            self.pending_input = self._history[-1 - self._cursor].command
        elif self._cursor == 0:
            self._cursor = NO_SELECTION
            self.pending_input = ""
        return self.pending_input

    async def aclose(self) -> None:
        if self._file_repository is not None:
            await self._file_repository.aclose()
