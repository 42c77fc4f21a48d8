"""Commands run by a tool executor and the results they produce."""

from __future__ import annotations

import abc
import enum
from collections.abc import Awaitable
from dataclasses import dataclass


class CommandKind(enum.Enum):
    """What a command asks the executor to do."""

    SHELL = "shell"
    READ_FILE = "read_file"
    WRITE_FILE = "write_file"


@dataclass(frozen=True)
class Command:
    """A shell command, or a file to read or write."""

    kind: CommandKind
    argument: str
    content: str | None = None

    @classmethod
    def shell(cls, cmd: str) -> Command:
        return cls(CommandKind.SHELL, cmd)

    @classmethod
    def read_file(cls, path: str) -> Command:
        return cls(CommandKind.READ_FILE, path)

    @classmethod
    def write_file(cls, path: str, content: str) -> Command:
        return cls(CommandKind.WRITE_FILE, path, content)


@dataclass(frozen=True)
class CommandOutput:
    """Captured output of a command."""

    output: str = ""

    def __str__(self) -> str:
        return self.output


class CommandError(Exception):
    """A command could not be run."""


class NonZeroExit(CommandError):
    """A command ran but exited with a non-zero status."""

    def __init__(self, output: CommandOutput | str):
        if isinstance(output, str):
            output = CommandOutput(output)
        super().__init__(output.output)
        self.output = output


class ToolExecutor(abc.ABC):
    """Runs commands on behalf of an agent."""

    @abc.abstractmethod
    async def exec_cmd(self, cmd: Command) -> CommandOutput:
        """Run the command and return its output; raise CommandError on failure."""


async def accept_non_zero_exit(awaitable: Awaitable[CommandOutput]) -> CommandOutput:
    """Await a command, treating a non-zero exit as ordinary output."""
    try:
        return await awaitable
    except NonZeroExit as exc:
        return exc.output