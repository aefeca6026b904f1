"""
Command dispatch table: case-insensitive name -> CommandSpec.
"""

import dataclasses
import inspect
import logging
from typing import Optional

from webterm.entities.command import CommandResult
from webterm.exceptions import (
    ArgumentError,
    FileRepositoryError,
    ShellError,
    UnknownCommandError,
)
from webterm.ports.commands.command_handler_port import (
    CommandContext,
    CommandHandlerPort,
    CommandSpec,
)
from webterm.use_cases.shell.tokenizer import tokenize


class CommandDispatcher:
    """Combine several command groups into a single dispatch table."""

    def __init__(
        self, *groups: CommandHandlerPort, logger: Optional[logging.Logger] = None
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._specs: dict[str, CommandSpec] = {}
        self._ordered: list[CommandSpec] = []
        for group in groups:
            for spec in group.available_commands():
                self._register(spec)

    def _register(self, spec: CommandSpec) -> None:
        for name in spec.names:
            key = name.lower()
            if key in self._specs:
                raise ValueError(f"Command registered twice: {key}")
            self._specs[key] = spec
        self._ordered.append(spec)

    def lookup(self, name: str) -> Optional[CommandSpec]:
        return self._specs.get(name.lower())

    def available_commands(self) -> list[CommandSpec]:
        return list(self._ordered)

    async def execute_line(self, raw_line: str, context: CommandContext) -> CommandResult:
        name, args = tokenize(raw_line)
        if not name:
            return CommandResult.ok()
        return await self.dispatch(name, args, context)

    async def dispatch(
        self, name: str, args: list[str], context: CommandContext
    ) -> CommandResult:
        """
        Run one command and return its result.

        Shell and storage errors become failed results; anything else is a
        defect and propagates.
        """
        spec = self.lookup(name)
        context = dataclasses.replace(context, runner=self)
        try:
            if spec is None:
                raise UnknownCommandError(name)
            self._check_arity(spec, args)
            result = spec.handler(args, context)
            if spec.asynchronous or inspect.isawaitable(result):
                result = await result
            return result
        except (ShellError, FileRepositoryError) as e:
            self._logger.info(f"Command '{name}' failed: {e}")
            return CommandResult.fail(str(e))

    def _check_arity(self, spec: CommandSpec, args: list[str]) -> None:
        if len(args) < spec.min_args or (
            spec.max_args is not None and len(args) > spec.max_args
        ):
            raise ArgumentError(f"Usage: {spec.usage}")
