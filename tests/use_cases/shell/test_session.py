"""
Tests for the interactive shell session.
"""

import asyncio
import os

import pytest

from webterm.entities.command import CommandResult
from webterm.exceptions import SessionBusyError
from webterm.ports.commands.command_handler_port import CommandHandlerPort, CommandSpec
from webterm.use_cases.shell.dispatcher import CommandDispatcher
from webterm.use_cases.shell.session import (
    NO_SELECTION,
    SessionState,
    ShellSession,
    normalize_working_path,
)


class TestShellSession:
    """Submit loop over the local backend."""

    @pytest.mark.asyncio
    async def test_mkdir_cd_touch(self, session, temp_directory):
        await session.submit("mkdir notes")
        entry = await session.submit("cd notes")
        assert entry.output == ("Changed directory to /notes",)
        assert session.working_path == "/notes"

        entry = await session.submit("touch plan")
        assert entry.output == ("File 'plan.txt' created",)
        assert os.path.isfile(os.path.join(temp_directory, "notes", "plan.txt"))
        assert (await session.submit("ls")).output == ("plan.txt",)
        assert (await session.submit("pwd")).output == ("/notes",)

        entry = await session.submit("cd ..")
        assert session.working_path == "/"
        assert [h.command for h in session.history] == [
            "mkdir notes",
            "cd notes",
            "touch plan",
            "cd ..",
        ]

    @pytest.mark.asyncio
    async def test_blank_submit_is_not_recorded(self, session):
        assert await session.submit("   ") is None
        assert session.history == ()

    @pytest.mark.asyncio
    async def test_failed_command_keeps_state(self, session):
        entry = await session.submit("cd nowhere")

        assert not entry.succeeded
        assert entry.output == ("cd: no such directory: nowhere",)
        assert session.working_path == "/"
        assert len(session.history) == 1

    @pytest.mark.asyncio
    async def test_unknown_command_is_recorded(self, session):
        entry = await session.submit("frobnicate")

        assert entry.output == ("Command 'frobnicate' not recognized",)
        assert session.history[-1].command == "frobnicate"

    @pytest.mark.asyncio
    async def test_cd_up_at_root(self, session):
        entry = await session.submit("cd ..")

        assert entry.succeeded
        assert entry.output == ("Already at root",)
        assert session.working_path == "/"

    @pytest.mark.asyncio
    async def test_clear_keeps_only_itself(self, session):
        await session.submit("pwd")
        await session.submit("echo hi")
        await session.submit("clear")

        assert [h.command for h in session.history] == ["clear"]

    @pytest.mark.asyncio
    async def test_history_shows_previous_commands(self, session):
        await session.submit("pwd")
        entry = await session.submit("history")

        assert len(entry.output) == 1
        assert entry.output[0].endswith("ok  pwd")

    @pytest.mark.asyncio
    async def test_script_does_not_move_the_session(self, session, temp_directory):
        with open(os.path.join(temp_directory, "go.sh"), "w") as f:
            f.write("cd docs\nls\n")

        entry = await session.submit("bash go.sh")

        assert session.working_path == "/"
        assert "Changed directory to /docs" in entry.output
        # ls ran in the script's starting directory
        assert "readme.txt" in entry.output

    @pytest.mark.asyncio
    async def test_dot_slash_runs_script_with_arguments(self, session, temp_directory):
        with open(os.path.join(temp_directory, "Greet.sh"), "w") as f:
            f.write("echo Hello $1 from $PWD as $USER\n")

        entry = await session.submit("./Greet.sh Sam")

        assert entry.succeeded
        assert "Hello Sam from / as alice" in entry.output

    @pytest.mark.asyncio
    async def test_recursive_script_is_bounded(self, session, temp_directory):
        with open(os.path.join(temp_directory, "loop.sh"), "w") as f:
            f.write("bash loop.sh\n")

        entry = await session.submit("bash loop.sh")

        assert not entry.succeeded
        assert any("nesting deeper than 8" in line for line in entry.output)

    @pytest.mark.asyncio
    async def test_script_continues_past_failing_line(self, session, temp_directory):
        with open(os.path.join(temp_directory, "steps.sh"), "w") as f:
            f.write("cat missing.txt\necho done\n")

        entry = await session.submit("bash steps.sh")

        assert entry.succeeded is False
        assert "'missing.txt' not found in /" in entry.output
        assert "done" in entry.output
        assert entry.output[-1] == "Script steps.sh finished: 1/2 lines succeeded"

    @pytest.mark.asyncio
    async def test_script_substitutes_arguments_and_directory(self, session, temp_directory):
        with open(os.path.join(temp_directory, "docs", "hello.sh"), "w") as f:
            f.write("echo Hello $1, you are in $PWD\n")
        await session.submit("cd docs")

        entry = await session.submit("bash hello.sh Sam")

        assert entry.succeeded
        assert "[1] echo Hello Sam, you are in /docs" in entry.output
        assert "Hello Sam, you are in /docs" in entry.output

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", ["docs/..", "./docs", "docs//empty"])
    async def test_unnormalized_cd_keeps_working_path(self, session, target):
        entry = await session.submit(f"cd {target}")

        assert not entry.succeeded
        assert entry.output == (
            f"Unsupported path: '{target}' (move one directory at a time)",
        )
        assert session.working_path == "/"

    @pytest.mark.asyncio
    async def test_cd_into_nested_directory_then_up(self, session):
        await session.submit("cd docs/empty")
        assert session.working_path == "/docs/empty"

        await session.submit("cd ..")

        assert session.working_path == "/docs"

    @pytest.mark.asyncio
    async def test_pwd_is_idempotent(self, session):
        await session.submit("cd docs")
        first = await session.submit("pwd")
        second = await session.submit("pwd")

        assert first.output == second.output == ("/docs",)
        assert session.working_path == "/docs"

    @pytest.mark.asyncio
    async def test_create_then_remove_restores_listing(self, session):
        before = (await session.submit("ls -a")).output

        await session.submit("mkdir tmp")
        await session.submit("touch scratch.md")
        assert (await session.submit("rm tmp")).succeeded
        assert (await session.submit("rm scratch.md")).succeeded

        assert (await session.submit("ls -a")).output == before

    @pytest.mark.asyncio
    async def test_whoami(self, session):
        entry = await session.submit("whoami")

        assert entry.output == ("alice",)


class TestRecall:
    @pytest.mark.asyncio
    async def test_recall_walks_history(self, session):
        for line in ("pwd", "echo a", "echo b"):
            await session.submit(line)

        assert session.cursor == NO_SELECTION
        assert session.recall_older() == "echo b"
        assert session.recall_older() == "echo a"
        assert session.recall_older() == "pwd"
        # stays on the oldest entry
        assert session.recall_older() == "pwd"
        assert session.recall_newer() == "echo a"
        assert session.recall_newer() == "echo b"
        assert session.recall_newer() == ""
        assert session.cursor == NO_SELECTION

    @pytest.mark.asyncio
    async def test_recall_with_empty_history(self, session):
        session.pending_input = "typed"

        assert session.recall_older() == "typed"
        assert session.recall_newer() == "typed"

    @pytest.mark.asyncio
    async def test_submit_resets_cursor(self, session):
        await session.submit("pwd")
        session.recall_older()

        await session.submit("echo x")

        assert session.cursor == NO_SELECTION
        assert session.pending_input == ""


class SlowCommands(CommandHandlerPort):
    def __init__(self):
        self.release = asyncio.Event()

    def available_commands(self):
        return [CommandSpec(name="slow", usage="slow", description="", handler=self._slow)]

    async def _slow(self, args, ctx):
        await self.release.wait()
        return CommandResult.ok("done")


class TestSessionGate:
    @pytest.mark.asyncio
    async def test_busy_session_rejects_submissions(self, mock_logger):
        commands = SlowCommands()
        session = ShellSession(CommandDispatcher(commands), "alice", logger=mock_logger)

        task = asyncio.create_task(session.submit("slow"))
        await asyncio.sleep(0)
        assert session.state is SessionState.PROCESSING

        with pytest.raises(SessionBusyError):
            await session.submit("slow")

        commands.release.set()
        entry = await task
        assert entry.output == ("done",)
        assert session.state is SessionState.IDLE
        assert len(session.history) == 1

    @pytest.mark.asyncio
    async def test_history_limit(self, mock_logger):
        session = ShellSession(
            CommandDispatcher(SlowCommands()), "alice", history_limit=2, logger=mock_logger
        )
        for i in range(4):
            await session.submit(f"nope{i}")

        assert [h.command for h in session.history] == ["nope2", "nope3"]

    @pytest.mark.asyncio
    async def test_aclose_closes_storage(self, mock_repository):
        session = ShellSession(
            CommandDispatcher(SlowCommands()), "alice", file_repository=mock_repository
        )

        await session.aclose()

        mock_repository.aclose.assert_awaited_once()


def test_normalize_working_path():
    assert normalize_working_path("/a//b/") == "/a/b"
    assert normalize_working_path("/") == "/"
    with pytest.raises(ValueError):
        normalize_working_path("relative")
