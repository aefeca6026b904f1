"""
Tests for the API router endpoints.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from webterm.exceptions import SessionBusyError
from webterm.main import app
from webterm.use_cases.shell.session import SessionState

client = TestClient(app)


@pytest.fixture(autouse=True)
def local_container(dependency_container):
    """Serve sessions from a container over the temporary tree."""
    with patch("webterm.api.dependencies.container", dependency_container):
        yield dependency_container


def open_session(**body):
    response = client.post("/sessions", json=body)
    assert response.status_code == 201
    return response.json()


class TestSessionsAPI:
    """Test cases for the session endpoints."""

    def test_create_session_defaults(self):
        data = open_session()

        assert data["user"] == "alice"
        assert data["working_path"] == "/"
        assert data["state"] == "idle"
        assert data["history_length"] == 0

    def test_create_session_with_identity(self):
        data = open_session(user="bob", working_path="/docs/")

        assert data["user"] == "bob"
        assert data["working_path"] == "/docs"

    def test_create_session_relative_path(self):
        response = client.post("/sessions", json={"working_path": "docs"})

        assert response.status_code == 400
        assert "absolute" in response.json()["detail"]

    def test_read_and_close_session(self):
        session_id = open_session()["session_id"]

        assert client.get(f"/sessions/{session_id}").status_code == 200
        assert client.delete(f"/sessions/{session_id}").status_code == 204
        assert client.get(f"/sessions/{session_id}").status_code == 404

    def test_unknown_session(self):
        response = client.post("/sessions/nope/commands", json={"command": "ls"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Unknown session: nope"


class TestCommandsAPI:
    def test_submit_command(self):
        session_id = open_session()["session_id"]

        response = client.post(f"/sessions/{session_id}/commands", json={"command": "cd docs"})

        assert response.status_code == 200
        data = response.json()
        assert data["command"] == "cd docs"
        assert data["output"] == ["Changed directory to /docs"]
        assert data["succeeded"] is True
        assert data["working_path"] == "/docs"

    def test_submit_failing_command(self):
        session_id = open_session()["session_id"]

        data = client.post(
            f"/sessions/{session_id}/commands", json={"command": "cat ghost"}
        ).json()

        assert data["succeeded"] is False
        assert data["output"] == ["'ghost' not found in /"]

    def test_blank_command(self):
        session_id = open_session()["session_id"]

        response = client.post(f"/sessions/{session_id}/commands", json={"command": "  "})

        assert response.status_code == 400

    def test_busy_session(self, local_container):
        session_id = open_session()["session_id"]
        session = local_container.get_session_registry().get(session_id)

        with patch.object(session, "submit", side_effect=SessionBusyError("busy")):
            response = client.post(f"/sessions/{session_id}/commands", json={"command": "ls"})

        assert response.status_code == 409
        assert response.json()["detail"] == "busy"

    def test_history_and_recall(self):
        session_id = open_session()["session_id"]
        for command in ("pwd", "whoami"):
            client.post(f"/sessions/{session_id}/commands", json={"command": command})

        history = client.get(f"/sessions/{session_id}/history").json()
        assert [e["command"] for e in history["entries"]] == ["pwd", "whoami"]

        recall = client.post(f"/sessions/{session_id}/recall", json={"direction": "older"})
        assert recall.json() == {"buffer": "whoami", "cursor": 0}

        recall = client.post(f"/sessions/{session_id}/recall", json={"direction": "newer"})
        assert recall.json() == {"buffer": "", "cursor": -1}

    def test_sessions_are_independent(self):
        first = open_session()["session_id"]
        second = open_session()["session_id"]

        client.post(f"/sessions/{first}/commands", json={"command": "cd docs"})

        assert client.get(f"/sessions/{first}").json()["working_path"] == "/docs"
        assert client.get(f"/sessions/{second}").json()["working_path"] == "/"


class TestSessionLimitAPI:
    def test_full_registry_of_busy_sessions(self, local_container):
        local_container.settings.max_sessions = 1
        local_container.reset()
        session_id = open_session()["session_id"]
        session = local_container.get_session_registry().get(session_id)
        session._state = SessionState.PROCESSING

        response = client.post("/sessions", json={})

        assert response.status_code == 503
        assert "busy" in response.json()["detail"]
