"""Commands sent to the backend and the events that carry them."""

from __future__ import annotations

import enum
import uuid as uuid_module
from dataclasses import dataclass, field, replace

from kwaak.commands.responder import NullResponder, Responder
from kwaak.execution import Command as ExecCommand


class CommandKind(enum.Enum):
    """The kinds of command the backend understands."""

    QUIT = "quit"
    SHOW_CONFIG = "show_config"
    INDEX_REPOSITORY = "index_repository"
    STOP_AGENT = "stop_agent"
    CHAT = "chat"
    DIFF = "diff"
    EXEC = "exec"
    RETRY_CHAT = "retry_chat"


@dataclass(frozen=True)
class Command:
    """A command for the backend, with its payload where it has one."""

    kind: CommandKind
    message: str | None = None
    cmd: ExecCommand | None = None

    def __str__(self) -> str:
        return self.kind.value

    @classmethod
    def quit(cls) -> Command:
        """Cleanly stop the backend."""
        return cls(CommandKind.QUIT)

    @classmethod
    def show_config(cls) -> Command:
        """Print the config the backend is using."""
        return cls(CommandKind.SHOW_CONFIG)

    @classmethod
    def index_repository(cls) -> Command:
        """Re-index the repository."""
        return cls(CommandKind.INDEX_REPOSITORY)

    @classmethod
    def stop_agent(cls) -> Command:
        """Stop an agent."""
        return cls(CommandKind.STOP_AGENT)

    @classmethod
    def chat(cls, message: str) -> Command:
        """Chat with an agent."""
        return cls(CommandKind.CHAT, message=message)

    @classmethod
    def diff(cls) -> Command:
        """Get the current changes made by the agent."""
        return cls(CommandKind.DIFF)

    @classmethod
    def exec(cls, cmd: ExecCommand) -> Command:
        """Execute a command in the context of an agent."""
        return cls(CommandKind.EXEC, cmd=cmd)

    @classmethod
    def retry_chat(cls) -> Command:
        """Reset history to the last chat and run it again."""
        return cls(CommandKind.RETRY_CHAT)


@dataclass(frozen=True)
class CommandEvent:
    """A command together with the chat it belongs to and where to respond."""

    command: Command
    uuid: uuid_module.UUID = field(default_factory=uuid_module.uuid4)
    responder: Responder = field(default_factory=NullResponder)

    @classmethod
    def quit(cls) -> CommandEvent:
        """A quit event with a fresh uuid and a responder that discards everything."""
        return cls(Command.quit(), uuid_module.uuid4(), NullResponder())

    def with_uuid(self, uuid: uuid_module.UUID) -> CommandEvent:
        """A copy of this event with another uuid."""
        return replace(self, uuid=uuid)