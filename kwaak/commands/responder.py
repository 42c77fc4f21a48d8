"""Responses from commands and the responders that handle them."""

from __future__ import annotations

import abc
import enum
import sys
import uuid as uuid_module
from dataclasses import dataclass, replace
from typing import Any, Protocol

from kwaak.completion import CompletionMessage

NIL_UUID = uuid_module.UUID(int=0)


class CommandResponseKind(enum.Enum):
    CHAT = "chat"
    ACTIVITY = "activity"
    RENAME_CHAT = "rename_chat"
    RENAME_BRANCH = "rename_branch"
    BACKEND_MESSAGE = "backend_message"
    COMPLETED = "completed"


@dataclass(frozen=True)
class CommandResponse:
    """A response to a command; the payload depends on the kind."""

    kind: CommandResponseKind
    uuid: uuid_module.UUID = NIL_UUID
    payload: Any = None

    def with_uuid(self, uuid: uuid_module.UUID) -> CommandResponse:
        """Attach a uuid; agent chat messages keep the uuid they came with."""
        if self.kind is CommandResponseKind.CHAT:
            return self
        return replace(self, uuid=uuid)


class Responder(abc.ABC):
    """Reacts to updates from commands."""

    @abc.abstractmethod
    def send(self, response: CommandResponse) -> None:
        """Generic handler for command responses."""

    @abc.abstractmethod
    def agent_message(self, message: CompletionMessage) -> None:
        """Messages from an agent."""

    @abc.abstractmethod
    def system_message(self, message: str) -> None:
        """System messages from the backend."""

    @abc.abstractmethod
    def update(self, state: str) -> None:
        """State updates with a message from the backend."""

    @abc.abstractmethod
    def rename_chat(self, name: str) -> None:
        """Response to a rename request."""

    @abc.abstractmethod
    def rename_branch(self, name: str) -> None:
        """Response to a branch rename request."""


class _Queue(Protocol):
    def put_nowait(self, item: Any) -> None: ...


class QueueResponder(Responder):
    """Puts every response on a queue as a CommandResponse."""

    def __init__(self, queue: _Queue):
        self.queue = queue

    def send(self, response: CommandResponse) -> None:
        self.queue.put_nowait(response)

    def agent_message(self, message: CompletionMessage) -> None:
        self.send(CommandResponse(CommandResponseKind.CHAT, NIL_UUID, message))

    def system_message(self, message: str) -> None:
        self.send(CommandResponse(CommandResponseKind.BACKEND_MESSAGE, NIL_UUID, message))

    def update(self, state: str) -> None:
        self.send(CommandResponse(CommandResponseKind.ACTIVITY, NIL_UUID, state))

    def rename_chat(self, name: str) -> None:
        self.send(CommandResponse(CommandResponseKind.RENAME_CHAT, NIL_UUID, name))

    def rename_branch(self, name: str) -> None:
        self.send(CommandResponse(CommandResponseKind.RENAME_BRANCH, NIL_UUID, name))


class DebugResponder(Responder):
    """Writes every response to standard error."""

    def send(self, response: CommandResponse) -> None:
        print(f"DEBUG: Response: {response!r}", file=sys.stderr)

    def agent_message(self, message: CompletionMessage) -> None:
        print(f"DEBUG: Agent message: {message!r}", file=sys.stderr)

    def system_message(self, message: str) -> None:
        print(f"DEBUG: System message: {message}", file=sys.stderr)

    def update(self, state: str) -> None:
        print(f"DEBUG: State update: {state}", file=sys.stderr)

    def rename_chat(self, name: str) -> None:
        print(f"DEBUG: Chat renamed to: {name}", file=sys.stderr)

    def rename_branch(self, name: str) -> None:
        print(f"DEBUG: Branch renamed to: {name}", file=sys.stderr)


class NullResponder(Responder):
    """Discards every response."""

    def send(self, response: CommandResponse) -> None:
        pass

    def agent_message(self, message: CompletionMessage) -> None:
        pass

    def system_message(self, message: str) -> None:
        pass

    def update(self, state: str) -> None:
        pass

    def rename_chat(self, name: str) -> None:
        pass

    def rename_branch(self, name: str) -> None:
        pass