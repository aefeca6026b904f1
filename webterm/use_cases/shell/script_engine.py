"""
Script loading, substitution and line-by-line execution.

A script is a stored text file with one command per line. Blank lines and
lines starting with "#" are skipped. Before a line is tokenized, $1..$N are
replaced by the positional arguments, then $PWD, $USER and $@. A failing
line does not stop the run.
"""

import dataclasses
import logging
from typing import Optional, Sequence

from webterm.entities.command import (
    CommandResult,
    ScriptInvocation,
    ScriptLineResult,
    ScriptRunReport,
)
from webterm.exceptions import ScriptError, ScriptNestingError, ScriptNotFoundError
from webterm.ports.commands.command_handler_port import CommandContext
from webterm.ports.files.file_repository_port import FileRepositoryPort
from webterm.use_cases.shell.path_resolver import join
from webterm.use_cases.shell.tokenizer import tokenize

COMMENT_PREFIX = "#"


def substitute_line(line: str, args: Sequence[str], working_path: str, user: str) -> str:
    # highest index first so "$1" never consumes the prefix of "$10"
    for k in range(len(args), 0, -1):
        line = line.replace(f"${k}", args[k - 1])
    line = line.replace("$PWD", working_path)
    line = line.replace("$USER", user)
    return line.replace("$@", " ".join(args))


def substitute_script(
    text: str, args: Sequence[str], working_path: str, user: str
) -> list[tuple[int, str]]:
    """Return (1-based source line number, substituted text) for each command line."""
    lines: list[tuple[int, str]] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        lines.append((number, substitute_line(stripped, args, working_path, user)))
    return lines


class ScriptEngine:
    """Runs stored scripts through the command dispatch table."""

    def __init__(
        self,
        file_repository: FileRepositoryPort,
        max_depth: int = 8,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._repo = file_repository
        self._max_depth = max_depth
        self._logger = logger or logging.getLogger(__name__)

    async def load(self, name: str, working_path: str) -> str:
        """
        Read a script stored in the given directory.

        Raises:
            ScriptNotFoundError: If no file of that name exists there
        """
        for entry in await self._repo.list_entries(working_path):
            if entry.name == name and not entry.is_dir:
                return await self._repo.read_text(join(working_path, name))
        raise ScriptNotFoundError(f"Script '{name}' not found in {working_path}")

    async def run(
        self, name: str, args: Sequence[str], context: CommandContext
    ) -> ScriptRunReport:
        if context.depth >= self._max_depth:
            raise ScriptNestingError(
                f"Script '{name}' not run: nesting deeper than {self._max_depth} levels"
            )
        text = await self.load(name, context.working_path)
        invocation = ScriptInvocation(
            script_name=name,
            script_text=text,
            args=tuple(args),
            working_path=context.working_path,
            user=context.user,
        )
        return await self.execute(invocation, context)

    async def execute(
        self, invocation: ScriptInvocation, context: CommandContext
    ) -> ScriptRunReport:
        """
        Execute every command line of a script.

        Each line runs against the working path captured at invocation;
        directory changes and history clearing requested by a line are not
        applied.
        """
        runner = context.runner
        if runner is None:
            raise ScriptError("No command runner available for script execution")

        line_context = dataclasses.replace(
            context, working_path=invocation.working_path, depth=context.depth + 1
        )
        name = invocation.script_name
        banner = f"Running script {name}"
        if invocation.args:
            banner += f" with arguments: {' '.join(invocation.args)}"
        output: list[str] = [banner]
        results: list[ScriptLineResult] = []

        self._logger.info(f"Running script {name} in {invocation.working_path}")
        for number, text in substitute_script(
            invocation.script_text, invocation.args, invocation.working_path, invocation.user
        ):
            output.append(f"[{number}] {text}")
            try:
                command, args = tokenize(text)
                result = await runner.dispatch(command, args, line_context)
            except Exception as e:
                self._logger.exception(f"Script {name} line {number} crashed")
                result = CommandResult.fail(f"Line {number} failed: {e}")
            output.extend(result.output)
            results.append(ScriptLineResult(line_number=number, text=text, result=result))

        succeeded = sum(1 for r in results if r.result.succeeded)
        output.append(f"Script {name} finished: {succeeded}/{len(results)} lines succeeded")
        return ScriptRunReport(
            script_name=name,
            args=invocation.args,
            lines=tuple(results),
            output=tuple(output),
        )
