"""
Commands reading the text content of files.
"""

import logging
from typing import Optional

from webterm.entities.command import CommandResult
from webterm.exceptions import ArgumentError, ShellError
from webterm.ports.commands.command_handler_port import (
    CommandContext,
    CommandHandlerPort,
    CommandSpec,
)
from webterm.ports.files.file_repository_port import FileRepositoryPort
from webterm.use_cases.commands.common import find_entry
from webterm.use_cases.shell.path_resolver import join

DEFAULT_LINE_COUNT = 10


class TextCommandsHandler(CommandHandlerPort):
    """cat, head, tail, grep and wc."""

    def __init__(
        self,
        file_repository: FileRepositoryPort,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._repo = file_repository
        self._logger = logger or logging.getLogger(__name__)

    def available_commands(self) -> list[CommandSpec]:
        return [
            CommandSpec(
                name="cat",
                usage="cat <file>",
                description="Print the content of a file",
                handler=self._cmd_cat,
                min_args=1,
                max_args=1,
                examples=("cat readme.txt",),
            ),
            CommandSpec(
                name="head",
                usage="head <file> [n]",
                description=f"Print the first n lines of a file (default {DEFAULT_LINE_COUNT})",
                handler=self._cmd_head,
                min_args=1,
                max_args=2,
                examples=("head log.txt", "head log.txt 5"),
            ),
            CommandSpec(
                name="tail",
                usage="tail <file> [n]",
                description=f"Print the last n lines of a file (default {DEFAULT_LINE_COUNT})",
                handler=self._cmd_tail,
                min_args=1,
                max_args=2,
                examples=("tail log.txt", "tail log.txt 20"),
            ),
            CommandSpec(
                name="grep",
                usage="grep <pattern> <file>",
                description="Print lines containing a pattern (case-insensitive)",
                handler=self._cmd_grep,
                min_args=2,
                max_args=2,
                examples=("grep todo notes.txt",),
            ),
            CommandSpec(
                name="wc",
                usage="wc <file>",
                description="Count lines, words and characters of a file",
                handler=self._cmd_wc,
                min_args=1,
                max_args=1,
            ),
        ]

    async def _read(self, command: str, name: str, working_path: str) -> str:
        entry = await find_entry(self._repo, working_path, name)
        if entry.is_dir:
            raise ShellError(f"{command}: '{name}' is a directory")
        return await self._repo.read_text(join(working_path, entry.name))

    def _line_count(self, args: list[str]) -> int:
        if len(args) < 2:
            return DEFAULT_LINE_COUNT
        try:
            n = int(args[1])
        except ValueError:
            raise ArgumentError(f"Invalid line count: '{args[1]}'")
        if n < 0:
            raise ArgumentError(f"Invalid line count: '{args[1]}'")
        return n

    async def _cmd_cat(self, args: list[str], ctx: CommandContext) -> CommandResult:
        content = await self._read("cat", args[0], ctx.working_path)
        return CommandResult.ok(*(content.splitlines() or [""]))

    async def _cmd_head(self, args: list[str], ctx: CommandContext) -> CommandResult:
        n = self._line_count(args)
        lines = (await self._read("head", args[0], ctx.working_path)).splitlines()
        return CommandResult.ok(*(lines[:n] or [f"{args[0]}: no lines"]))

    async def _cmd_tail(self, args: list[str], ctx: CommandContext) -> CommandResult:
        n = self._line_count(args)
        lines = (await self._read("tail", args[0], ctx.working_path)).splitlines()
        selected = lines[-n:] if n else []
        return CommandResult.ok(*(selected or [f"{args[0]}: no lines"]))

    async def _cmd_grep(self, args: list[str], ctx: CommandContext) -> CommandResult:
        pattern, name = args
        needle = pattern.lower()
        content = await self._read("grep", name, ctx.working_path)
        matches = [
            f"{number}: {line}"
            for number, line in enumerate(content.splitlines(), start=1)
            if needle in line.lower()
        ]
        if not matches:
            return CommandResult.ok(f"No match for '{pattern}' in {name}")
        return CommandResult.ok(*matches)

    async def _cmd_wc(self, args: list[str], ctx: CommandContext) -> CommandResult:
        content = await self._read("wc", args[0], ctx.working_path)
        lines = len(content.splitlines())
        words = len(content.split())
        return CommandResult.ok(f"{lines:>7} {words:>7} {len(content):>7} {args[0]}")
