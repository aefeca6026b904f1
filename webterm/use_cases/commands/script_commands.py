"""
Commands for running and scaffolding scripts.
"""

import logging
from typing import Optional

from webterm.entities.command import CommandResult
from webterm.entities.entry import extension_of
from webterm.ports.commands.command_handler_port import (
    CommandContext,
    CommandHandlerPort,
    CommandSpec,
)
from webterm.ports.files.file_repository_port import FileRepositoryPort
from webterm.use_cases.commands.common import validate_name
from webterm.use_cases.shell.script_engine import ScriptEngine
from webterm.use_cases.shell.tokenizer import SCRIPT_PREFIX

SCRIPT_TEMPLATE = """\
# {name}
# Run with: bash {name} [arguments...]
#
# One command per line. Lines starting with # are ignored.
# $1, $2, ... are the arguments, $@ all of them,
# $PWD the directory the script runs in and $USER the current user.
#
# echo Hello $1
"""


class ScriptCommandsHandler(CommandHandlerPort):
    """bash / sh / ./name and script."""

    def __init__(
        self,
        engine: ScriptEngine,
        file_repository: FileRepositoryPort,
        script_extension: str = ".sh",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._engine = engine
        self._repo = file_repository
        self._extension = script_extension
        self._logger = logger or logging.getLogger(__name__)

    def available_commands(self) -> list[CommandSpec]:
        return [
            CommandSpec(
                name="bash",
                aliases=("sh", SCRIPT_PREFIX),
                usage="bash <script> [args...]",
                description="Run a script of the working directory (also: sh, ./script)",
                handler=self._cmd_run,
                min_args=1,
                examples=("bash setup.sh", "sh greet.sh Sam", "./greet.sh Sam"),
            ),
            CommandSpec(
                name="script",
                usage="script <name>",
                description=f"Create a new script from a template ({self._extension})",
                handler=self._cmd_script,
                min_args=1,
                max_args=1,
                examples=("script backup", f"script deploy{self._extension}"),
            ),
        ]

    async def _cmd_run(self, args: list[str], ctx: CommandContext) -> CommandResult:
        report = await self._engine.run(args[0], args[1:], ctx)
        if not report.succeeded:
            self._logger.info(
                f"Script {report.script_name} had failing lines: {report.failed_lines}"
            )
        return report.to_result()

    async def _cmd_script(self, args: list[str], ctx: CommandContext) -> CommandResult:
        name = validate_name("script", args[0])
        if extension_of(name) is None:
            name = f"{name}{self._extension}"
        if not name.endswith(self._extension):
            return CommandResult.fail(f"script: '{name}' must end with {self._extension}")
        await self._repo.write_new_file(ctx.working_path, name, SCRIPT_TEMPLATE.format(name=name))
        return CommandResult.ok(
            f"Script '{name}' created", f"Edit it, then run: bash {name} [args...]"
        )
