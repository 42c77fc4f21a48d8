"""Chat messages as stored and displayed in a chat."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from kwaak.completion import (
    AssistantMessage,
    CompletionMessage,
    SystemMessage,
    ToolCall,
    ToolOutputMessage,
    UserMessage,
)


class ChatRole(enum.Enum):
    """Who a chat message comes from."""

    USER = "User"
    SYSTEM = "System"
    COMMAND = "Command"
    ASSISTANT = "Assistant"
    TOOL = "Tool"

    def __str__(self) -> str:
        return self.value


@dataclass
class ChatMessage:
    """A formatted message shown as-is in a chat."""

    role: ChatRole = ChatRole.SYSTEM
    content: str = ""
    original: CompletionMessage | None = None
    rendered: Any = field(default=None, repr=False)

    @classmethod
    def new_user(cls, msg: str) -> ChatMessage:
        return cls(ChatRole.USER, str(msg))

    @classmethod
    def new_system(cls, msg: str) -> ChatMessage:
        return cls(ChatRole.SYSTEM, str(msg))

    @classmethod
    def new_command(cls, cmd: str) -> ChatMessage:
        return cls(ChatRole.COMMAND, str(cmd))

    @classmethod
    def new_assistant(cls, msg: str) -> ChatMessage:
        return cls(ChatRole.ASSISTANT, str(msg))

    @classmethod
    def new_tool(cls, msg: str) -> ChatMessage:
        return cls(ChatRole.TOOL, str(msg))

    @classmethod
    def from_completion(cls, msg: CompletionMessage) -> ChatMessage:
        """Build a chat message from a completion message, keeping it as original."""
        if isinstance(msg, SystemMessage):
            message = cls.new_system(msg.content)
        elif isinstance(msg, UserMessage):
            message = cls.new_user(msg.content)
        elif isinstance(msg, AssistantMessage):
            message = cls.new_assistant(msg.content or "")
        elif isinstance(msg, ToolOutputMessage):
            message = cls.new_tool(f"tool `{msg.tool_call.name}` completed")
        else:
            raise TypeError(f"cannot display {type(msg).__name__} as a chat message")
        message.original = msg
        return message

    def maybe_completed_tool_call(self) -> ToolCall | None:
        """The tool call this message completes, if any."""
        if isinstance(self.original, ToolOutputMessage):
            return self.original.tool_call
        return None