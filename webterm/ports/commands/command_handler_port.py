"""
Port and types for shell command handlers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Protocol, Sequence, Union

from webterm.entities.command import CommandResult, HistoryEntry


class CommandRunner(Protocol):
    """Anything able to dispatch a tokenized command (the dispatch table)."""

    async def dispatch(
        self, name: str, args: list[str], context: "CommandContext"
    ) -> CommandResult: ...

    def lookup(self, name: str) -> Optional["CommandSpec"]: ...

    def available_commands(self) -> list["CommandSpec"]: ...


@dataclass(frozen=True)
class CommandContext:
    """Read-only view of the session handed to every handler."""

    working_path: str
    user: str
    history: Sequence[HistoryEntry] = ()
    depth: int = 0
    runner: Optional[CommandRunner] = None


CommandHandler = Callable[
    [list[str], CommandContext], Union[CommandResult, Awaitable[CommandResult]]
]


@dataclass(frozen=True)
class CommandSpec:
    """Specification for a builtin shell command."""

    name: str
    usage: str
    description: str
    handler: CommandHandler
    min_args: int = 0
    max_args: Optional[int] = None
    asynchronous: bool = True
    aliases: tuple[str, ...] = ()
    examples: tuple[str, ...] = field(default=())

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)


class CommandHandlerPort(ABC):
    """
    Port interface for a group of shell commands.

    A group exposes the specs of the commands it implements; the dispatch
    table is built from the specs of every group.
    """

    @abstractmethod
    def available_commands(self) -> list[CommandSpec]:
        """
        Get the commands implemented by this group.

        Returns:
            List of command specifications
        """
        pass
