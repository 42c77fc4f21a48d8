"""Chat messages, tool calls and tool descriptions used by the agent."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class ToolCall:
    """A request from the model to run a tool."""

    id: str
    name: str
    args: str | None = None


@dataclass(frozen=True)
class ToolOutput:
    """Result of running a tool, as handed back to the model."""

    content: str | None = None

    def __str__(self) -> str:
        return self.content or ""


@dataclass(frozen=True)
class Tool:
    """A tool the agent can call, identified by its name."""

    name: str
    description: str = ""


@dataclass(frozen=True)
class SystemMessage:
    """System instruction for the model."""

    content: str


@dataclass(frozen=True)
class UserMessage:
    """Message written by the user."""

    content: str


@dataclass(frozen=True)
class AssistantMessage:
    """Reply from the model, optionally requesting tool calls."""

    content: str | None = None
    tool_calls: tuple[ToolCall, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ToolOutputMessage:
    """The output of a completed tool call."""

    tool_call: ToolCall
    output: ToolOutput


@dataclass(frozen=True)
class SummaryMessage:
    """A summary of the conversation so far."""

    content: str


CompletionMessage = Union[
    SystemMessage, UserMessage, AssistantMessage, ToolOutputMessage, SummaryMessage
]