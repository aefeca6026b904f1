"""
Registry of live shell sessions, keyed by an opaque id.
"""

import logging
import uuid
from typing import Callable, Optional

from webterm.exceptions import SessionLimitError
from webterm.use_cases.shell.session import SessionState, ShellSession

SessionFactory = Callable[[Optional[str], str], ShellSession]


class SessionRegistry:
    """Holds independent sessions; nothing is shared between them.

    With ``max_sessions`` set, opening a session beyond the cap closes the
    least recently used idle session first.
    """

    def __init__(
        self,
        factory: SessionFactory,
        max_sessions: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._factory = factory
        self._max_sessions = max_sessions or None
        self._sessions: dict[str, ShellSession] = {}
        self._logger = logger or logging.getLogger(__name__)

    async def create(
        self, user: Optional[str] = None, working_path: str = "/"
    ) -> tuple[str, ShellSession]:
        """
        Open a session, evicting the least recently used idle one when full.

        Raises:
            ValueError: If the working path is not absolute
            SessionLimitError: If the registry is full and every session is busy
        """
        if self._max_sessions and len(self._sessions) >= self._max_sessions:
            await self._evict()
        session = self._factory(user, working_path)
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = session
        self._logger.info(f"Opened session {session_id} for {session.user}")
        return session_id, session

    async def _evict(self) -> None:
        # dict order is least recently used first
        for session_id, session in self._sessions.items():
            if session.state is SessionState.IDLE:
                self._logger.info(f"Session limit reached, evicting {session_id}")
                await self.close(session_id)
                return
        raise SessionLimitError(
            f"Too many open sessions ({self._max_sessions}), all of them busy"
        )

    def get(self, session_id: str) -> ShellSession:
        """
        Raises:
            KeyError: If no session has this id
        """
        session = self._sessions.pop(session_id)
        self._sessions[session_id] = session
        return session

    def __len__(self) -> int:
        return len(self._sessions)

    async def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id)
        await session.aclose()
        self._logger.info(f"Closed session {session_id}")

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close(session_id)
