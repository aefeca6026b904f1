"""
FastAPI router definitions for the terminal session endpoints.
"""

from fastapi import APIRouter, HTTPException, Response

from webterm.api.dependencies import get_session, get_session_registry
from webterm.api.schemas import (
    CommandRequest,
    CommandResponse,
    CreateSessionRequest,
    ErrorResponse,
    HistoryEntryInfo,
    HistoryResponse,
    RecallDirection,
    RecallRequest,
    RecallResponse,
    SessionInfo,
)
from webterm.exceptions import SessionBusyError, SessionLimitError
from webterm.use_cases.shell.session import ShellSession

router = APIRouter()


def _session_info(session_id: str, session: ShellSession) -> SessionInfo:
    return SessionInfo(
        session_id=session_id,
        user=session.user,
        working_path=session.working_path,
        state=session.state.value,
        history_length=len(session.history),
    )


@router.post(
    "/sessions",
    response_model=SessionInfo,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_session(request: CreateSessionRequest):
    """
    Open a new terminal session.

    Returns:
        SessionInfo: The new session

    Raises:
        HTTPException: 400 if the working path is not absolute, 503 when the
            session limit is reached and every session is busy
    """
    try:
        session_id, session = await get_session_registry().create(
            request.user, request.working_path
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SessionLimitError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _session_info(session_id, session)


@router.get(
    "/sessions/{session_id}",
    response_model=SessionInfo,
    responses={404: {"model": ErrorResponse}},
)
def read_session(session_id: str):
    """Describe a session."""
    return _session_info(session_id, get_session(session_id))


@router.delete(
    "/sessions/{session_id}", status_code=204, responses={404: {"model": ErrorResponse}}
)
async def close_session(session_id: str):
    """Close a session and release its storage client."""
    get_session(session_id)
    await get_session_registry().close(session_id)
    return Response(status_code=204)


@router.post(
    "/sessions/{session_id}/commands",
    response_model=CommandResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def submit_command(session_id: str, request: CommandRequest):
    """
    Run one command line in a session.

    Args:
        session_id: Target session
        request: The command line

    Returns:
        CommandResponse: Output, status and the working directory afterwards

    Raises:
        HTTPException: 400 for a blank line, 404 for an unknown session,
            409 while another command of the session is running
    """
    session = get_session(session_id)
    try:
        entry = await session.submit(request.command)
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if entry is None:
        raise HTTPException(status_code=400, detail="Empty command")
    info = HistoryEntryInfo.from_entity(entry)
    return CommandResponse(**info.model_dump(), working_path=session.working_path)


@router.get(
    "/sessions/{session_id}/history",
    response_model=HistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
def read_history(session_id: str):
    """Return the history of a session, oldest first."""
    session = get_session(session_id)
    return HistoryResponse(entries=[HistoryEntryInfo.from_entity(e) for e in session.history])


@router.post(
    "/sessions/{session_id}/recall",
    response_model=RecallResponse,
    responses={404: {"model": ErrorResponse}},
)
def recall(session_id: str, request: RecallRequest):
    """Move the history cursor (arrow up / arrow down) and return the pending input."""
    session = get_session(session_id)
    if request.direction is RecallDirection.older:
        buffer = session.recall_older()
    else:
        buffer = session.recall_newer()
    return RecallResponse(buffer=buffer, cursor=session.cursor)
