"""
FastAPI dependency functions for retrieving sessions from the container.
"""

from fastapi import HTTPException

from webterm.container import container
from webterm.use_cases.shell.session import ShellSession
from webterm.use_cases.shell.session_registry import SessionRegistry


def get_session_registry() -> SessionRegistry:
    """
    Get the session registry from the container.

    Returns:
        SessionRegistry: The registry shared by all API requests
    """
    return container.get_session_registry()


def get_session(session_id: str) -> ShellSession:
    """
    Look up a session by id.

    Raises:
        HTTPException: 404 if the session does not exist
    """
    try:
        return get_session_registry().get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
