"""
Session and environment commands: echo, history, clear, date, whoami, help.
"""

from datetime import datetime
from typing import Callable

from webterm.entities.command import CommandResult
from webterm.exceptions import ShellError
from webterm.ports.commands.command_handler_port import (
    CommandContext,
    CommandHandlerPort,
    CommandSpec,
)


class SystemCommandsHandler(CommandHandlerPort):
    """Commands that never touch storage."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock

    def available_commands(self) -> list[CommandSpec]:
        return [
            CommandSpec(
                name="echo",
                usage="echo [text...]",
                description="Print the arguments",
                handler=self._cmd_echo,
                asynchronous=False,
                examples=("echo Hello world",),
            ),
            CommandSpec(
                name="history",
                usage="history",
                description="Show the command history",
                handler=self._cmd_history,
                max_args=0,
                asynchronous=False,
            ),
            CommandSpec(
                name="clear",
                usage="clear",
                description="Clear the screen and the history",
                handler=self._cmd_clear,
                max_args=0,
                asynchronous=False,
            ),
            CommandSpec(
                name="date",
                usage="date",
                description="Show the current date and time",
                handler=self._cmd_date,
                max_args=0,
                asynchronous=False,
            ),
            CommandSpec(
                name="whoami",
                usage="whoami",
                description="Show the current user",
                handler=self._cmd_whoami,
                max_args=0,
                asynchronous=False,
            ),
            CommandSpec(
                name="help",
                usage="help [command]",
                description="List the commands, or show help for one",
                handler=self._cmd_help,
                max_args=1,
                asynchronous=False,
                examples=("help", "help cd"),
            ),
        ]

    def _cmd_echo(self, args: list[str], ctx: CommandContext) -> CommandResult:
        return CommandResult.ok(" ".join(args))

    def _cmd_history(self, args: list[str], ctx: CommandContext) -> CommandResult:
        if not ctx.history:
            return CommandResult.ok("History is empty")
        return CommandResult.ok(
            *(
                f"{index:>4} [{entry.executed_at:%H:%M:%S}] "
                f"{'ok ' if entry.succeeded else 'err'} {entry.command}"
                for index, entry in enumerate(ctx.history, start=1)
            )
        )

    def _cmd_clear(self, args: list[str], ctx: CommandContext) -> CommandResult:
        return CommandResult.ok(clear_history=True)

    def _cmd_date(self, args: list[str], ctx: CommandContext) -> CommandResult:
        return CommandResult.ok(self._clock().strftime("%a %d %b %Y %H:%M:%S"))

    def _cmd_whoami(self, args: list[str], ctx: CommandContext) -> CommandResult:
        return CommandResult.ok(ctx.user)

    def _cmd_help(self, args: list[str], ctx: CommandContext) -> CommandResult:
        if ctx.runner is None:
            raise ShellError("help: no command table available")
        if args:
            spec = ctx.runner.lookup(args[0])
            if spec is None:
                return CommandResult.fail(
                    f"Command '{args[0]}' not recognized. Type 'help' to list commands."
                )
            lines = [
                f"Command: {spec.name}",
                f"Description: {spec.description}",
                f"Usage: {spec.usage}",
            ]
            if spec.aliases:
                lines.append(f"Aliases: {', '.join(spec.aliases)}")
            if spec.examples:
                lines.append("Examples:")
                lines.extend(f"  {example}" for example in spec.examples)
            return CommandResult.ok(*lines)

        specs = ctx.runner.available_commands()
        width = max(len(spec.usage) for spec in specs)
        lines = ["Available commands:", ""]
        lines.extend(f"  {spec.usage:<{width}}  {spec.description}" for spec in specs)
        lines.extend(["", "Type 'help <command>' for details."])
        return CommandResult.ok(*lines)
