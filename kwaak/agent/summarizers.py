"""Agent hooks that condense the conversation and reformat tool output."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

import jinja2

from kwaak.completion import (
    CompletionMessage,
    SummaryMessage,
    SystemMessage,
    Tool,
    ToolCall,
    ToolOutput,
    UserMessage,
)
from kwaak.execution import Command, CommandOutput, accept_non_zero_exit

logger = logging.getLogger(__name__)


class AgentContext(Protocol):
    async def exec_cmd(self, cmd: Command) -> CommandOutput: ...

    async def history(self) -> list[CompletionMessage]: ...

    async def add_message(self, message: CompletionMessage) -> None: ...


class ChatCompletion(Protocol):
    async def complete(self, messages: list[CompletionMessage]) -> str | None: ...


class SimplePrompt(Protocol):
    async def prompt(self, prompt: str) -> str: ...


_ENV = jinja2.Environment(
    autoescape=False,
    keep_trailing_newline=True,
    undefined=jinja2.StrictUndefined,
)

_CONVERSATION_TEMPLATE = _ENV.from_string(
    """# Goal
Summarize and review the conversation up to this point

## Requirements
* Only include the summary in your response and nothing else.
* If any, mention every file changed
* When mentioning files include the full path
* Be very precise and critical
* If a previous solution did not work, include that in your response. If a reason was
    given, include that as well.
* Include any previous summaries in your response
* Be extra detailed on the last step taken
* Provide clear instructions on how to proceed. If applicable, include the tools that
    should be used.
* Identify the bigger goal the user wanted to achieve and clearly restate it
* If the goal is not yet achieved, reflect on why and provide a clear path forward

{% if diff -%}
## Current changes made
````
{{ diff }}
````
{% endif %}

## Available tools
{{ available_tools }}

## Format
* Start your response with the following header '# Summary'
* Phrase each bullet point as if talking about 'you'

# Example format
```
# Summary

## Your goal
<Your goal>

## Previously you did
* <concise summary of each step>
* You tried to run the tests but they failed. Here is why <...>

## Since then you did
* <Summary of steps since the last summary>

## Reflection
<Concise reflection on the steps you took and why you took them>

## Suggested next steps
1. <Suggested step>
```
"""
)

_TOOL_TEMPLATE = _ENV.from_string(
    """# Goal
A coding agent has made a tool call. It is your job to refine the output.

Reformat the following tool output such that it is effective for a chatgpt agent to work with. Only include the reformatted output in your response.
Reformat but do not summarize, all information should be preserved and detailed.

## 
Tool name: {{ tool_name }}
Tool description: {{ tool_description }}
Tool was called with arguments: {{ tool_args }}

{{ additional_instructions }}

{% if diff -%}
## The agent has made the following changes
````
{{ diff }}
````
{% endif %}

## Tool output
```
{{ tool_output }}
```

## Format
* Only include the reformatted output in your response and nothing else.
* Include clear instructions on how to fix each issue using the tools that are
  available only.
* If you do not have a clear solution, state that you do not have a clear solution.
* If there is any mangling in the tool response, reformat it to be readable.
{% if diff -%}
* If you suspect that any changes made by the agent affect the tool output, mention
    that. Make sure you include full paths to the files.
{% endif -%}

## Available tools
{{ formatted_tools }}

## Requirements
* Only propose improvements that can be fixed by the tools and functions that are
    available in the conversation. For instance, running a command to fix linting can also be fixed by writing to that file without errors.
* If the tool output has repeating patterns, only include the pattern once and state
 that it happens multiple times.
"""
)

_ADDITIONAL_TEST_INSTRUCTIONS = """## Additional instructions
* If the tests pass, additionally mention that coverage must be checked such that
  it actually improved, did not stay the same, and the file executed properly.
"""


def _format_tools(tools: Iterable[Tool]) -> str:
    """One bullet per tool, with only the first line of its description."""
    return "\n".join(
        f"- **{tool.name}**: {tool.description.split(chr(10), 1)[0].rstrip(chr(13))}"
        for tool in tools
    )


async def _current_diff(context: AgentContext, git_start_sha: str) -> str:
    output = await accept_non_zero_exit(
        context.exec_cmd(Command.shell(f"git diff {git_start_sha} --no-color"))
    )
    return output.output


def filter_messages_since_summary(
    messages: Sequence[CompletionMessage],
) -> list[CompletionMessage]:
    """Keep the last summary and what follows it, plus every earlier system message."""
    kept: list[CompletionMessage] = []
    summary_found = False
    for message in reversed(messages):
        if summary_found:
            if isinstance(message, SystemMessage):
                kept.append(message)
            continue
        if isinstance(message, SummaryMessage):
            summary_found = True
        kept.append(message)
    kept.reverse()
    return kept


def tool_summary_prompt(
    tool: Tool,
    tool_call: ToolCall,
    tool_output: ToolOutput,
    available_tools: Sequence[Tool],
    diff: str | None = None,
) -> str:
    """Render the prompt asking to reformat a tool's output."""
    if tool_call.name == "run_tests" and any(t.name == "run_coverage" for t in available_tools):
        additional_instructions = _ADDITIONAL_TEST_INSTRUCTIONS
    else:
        additional_instructions = ""

    return _TOOL_TEMPLATE.render(
        tool_name=tool.name,
        tool_description=tool.description,
        tool_args=tool_call.args or "",
        additional_instructions=additional_instructions,
        diff=diff or None,
        tool_output=tool_output.content or "",
        formatted_tools=_format_tools(available_tools),
    )


@dataclass
class ConversationSummarizer:
    """Summarizes the conversation once enough completions have passed since the last one."""

    llm: ChatCompletion
    available_tools: Sequence[Tool]
    git_start_sha: str
    num_completions_for_summary: int
    num_completions_since_summary: int = field(default=0, init=False)

    def prompt(self, diff: str | None = None) -> str:
        """Render the summary prompt, including the diff when there is one."""
        return _CONVERSATION_TEMPLATE.render(
            diff=diff or None,
            available_tools=_format_tools(self.available_tools),
        )

    async def summarize(self, context: AgentContext) -> str | None:
        """Count a completion; when the threshold is passed, add a summary to the context."""
        current_count = self.num_completions_since_summary
        self.num_completions_since_summary += 1

        if current_count < self.num_completions_for_summary:
            logger.debug("Not enough completions for summary (%d)", current_count)
            return None

        self.num_completions_since_summary = 0

        diff = await _current_diff(context, self.git_start_sha)
        prompt = self.prompt(diff)

        messages = filter_messages_since_summary(await context.history())
        messages.append(UserMessage(prompt))

        summary = await self.llm.complete(messages)
        if summary:
            logger.debug("Summarized conversation: %s", summary)
            await context.add_message(SummaryMessage(summary))
            return summary

        logger.error("No summary generated, this is a bug")
        return None


@dataclass
class ToolSummarizer:
    """Rewrites the output of selected tools into a form the agent works with better."""

    llm: SimplePrompt
    tools_to_summarize: Sequence[str]
    available_tools: Sequence[Tool]
    git_start_sha: str

    def _tool_for(self, tool_call: ToolCall) -> Tool | None:
        if tool_call.name not in self.tools_to_summarize:
            return None
        return next((t for t in self.available_tools if t.name == tool_call.name), None)

    async def summarize(
        self,
        context: AgentContext,
        tool_call: ToolCall,
        tool_output: ToolOutput | Exception,
    ) -> ToolOutput | Exception:
        """Return the refined output, or the original when the tool is not summarized."""
        tool = self._tool_for(tool_call)
        if tool is None or not isinstance(tool_output, ToolOutput):
            return tool_output

        diff = await _current_diff(context, self.git_start_sha)
        prompt = tool_summary_prompt(
            tool, tool_call, tool_output, self.available_tools, diff or None
        )

        summary = await self.llm.prompt(prompt)
        logger.debug("Summarized tool output of %s: %s", tool.name, summary)
        return ToolOutput(summary)