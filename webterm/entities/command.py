"""
Command, history and script-run value objects.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command invocation.

    ``working_path`` and ``clear_history`` are effect requests applied by the
    interactive session; script runs ignore them.
    """

    output: tuple[str, ...]
    succeeded: bool
    working_path: Optional[str] = None
    clear_history: bool = False

    @classmethod
    def ok(cls, *lines: str, **effects) -> "CommandResult":
        return cls(output=tuple(lines), succeeded=True, **effects)

    @classmethod
    def fail(cls, *lines: str) -> "CommandResult":
        return cls(output=tuple(lines), succeeded=False)


@dataclass(frozen=True)
class HistoryEntry:
    command: str
    output: tuple[str, ...]
    succeeded: bool
    executed_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class ScriptInvocation:
    script_name: str
    script_text: str
    args: tuple[str, ...]
    working_path: str
    user: str


@dataclass(frozen=True)
class ScriptLineResult:
    line_number: int
    text: str
    result: CommandResult


@dataclass(frozen=True)
class ScriptRunReport:
    """Aggregated result of a script run."""

    script_name: str
    args: tuple[str, ...]
    lines: tuple[ScriptLineResult, ...]
    output: tuple[str, ...]

    @property
    def succeeded(self) -> bool:
        return all(line.result.succeeded for line in self.lines)

    @property
    def failed_lines(self) -> list[int]:
        return [line.line_number for line in self.lines if not line.result.succeeded]

    def to_result(self) -> CommandResult:
        return CommandResult(output=self.output, succeeded=self.succeeded)
