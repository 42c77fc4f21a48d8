# kwaak

Building blocks for running an autonomous coding agent against a project.

## What is in the package

- `kwaak.completion`: the messages exchanged with a model
  (`SystemMessage`, `UserMessage`, `AssistantMessage`, `ToolOutputMessage`,
  `SummaryMessage`), together with `ToolCall`, `ToolOutput` and `Tool`.
- `kwaak.execution`: `Command` (`Command.shell`, `Command.read_file`,
  `Command.write_file`), `CommandOutput`, the `ToolExecutor` interface the
  tools run through, the `CommandError` / `NonZeroExit` exceptions, and
  `accept_non_zero_exit`, which turns a non-zero exit into ordinary output.
- `kwaak.chat_message`: `ChatMessage` with a `ChatRole`, built with
  `ChatMessage.new_user`, `new_system`, `new_command`, `new_assistant`,
  `new_tool`, or from a completion message with
  `ChatMessage.from_completion`. `maybe_completed_tool_call()` returns the
  tool call a tool-output message completes.
- `kwaak.commands.command`: the backend commands (`Command.quit`,
  `show_config`, `index_repository`, `stop_agent`, `chat`, `diff`, `exec`,
  `retry_chat`) and `CommandEvent`, which pairs a command with a uuid and a
  responder.
- `kwaak.commands.responder`: `CommandResponse` and the `Responder`
  interface, with `QueueResponder` (puts every response on a queue),
  `DebugResponder` (writes to standard error) and `NullResponder` (discards
  everything).
- `kwaak.agent.util`: `rename_chat` and `create_branch_name`, which ask a
  fast model for a chat title (at most 60 characters) and a branch name
  (`kwaak/<name>-<first 8 characters of the uuid>`).
- `kwaak.agent.tools`: `read_file`, `read_file_with_line_numbers`,
  `write_file`, `search_file` (fd), `search_code` (ripgrep), `add_lines`, and
  the `ResetFile`, `RunTests` and `RunCoverage` tools.
- `kwaak.agent.replace_lines`: `replace_lines` and `replace_content`, which
  replace a 1-indexed, inclusive region of lines in a file.
- `kwaak.agent.env_setup`: `EnvSetup.exec_setup_commands` configures git (and
  a GitHub remote with a token when a session is given) and returns an
  `AgentEnvironment` with the branch, the starting ref and whether pushing is
  possible.
- `kwaak.agent.summarizers`: `ConversationSummarizer` adds a summary to the
  conversation once enough completions have passed; `ToolSummarizer`
  rewrites the output of selected tools; `filter_messages_since_summary` and
  `tool_summary_prompt` are the pieces they are built from.
- `kwaak.cli`: `build_parser` and `parse_args` for the command-line options
  and subcommands.

## Installation

Install the package with pip from a checkout; the `test` extra adds pytest and
pytest-asyncio. The only runtime dependency is jinja2, used for the
summarizer prompts.

## Examples

Editing files through a tool executor. Any object implementing
`ToolExecutor.exec_cmd` will do; this one keeps files in memory:

```python
import asyncio

from kwaak.agent.tools import add_lines, read_file_with_line_numbers
from kwaak.execution import CommandKind, CommandOutput, NonZeroExit, ToolExecutor


class MemoryExecutor(ToolExecutor):
    def __init__(self, files):
        self.files = files

    async def exec_cmd(self, cmd):
        if cmd.kind is CommandKind.READ_FILE:
            if cmd.argument not in self.files:
                raise NonZeroExit("No such file")
            return CommandOutput(self.files[cmd.argument])
        if cmd.kind is CommandKind.WRITE_FILE:
            self.files[cmd.argument] = cmd.content
            return CommandOutput()
        raise NonZeroExit("shell commands are not supported here")


async def demo():
    executor = MemoryExecutor({"a.txt": "one\ntwo\n"})
    numbered = await read_file_with_line_numbers(executor, "a.txt")
    assert numbered.content == "1|one\n2|two"

    await add_lines(executor, "a.txt", "1", "middle")
    assert executor.files["a.txt"] == "one\nmiddle\ntwo"


asyncio.run(demo())
```

Tools report problems such as a bad line number or a missing file as their
output, so the agent can read them, rather than raising.

Replacing a region of a file by line numbers:

```python
from kwaak.agent.replace_lines import replace_content

source = "def a:\n  pass\n\ndef b:\n  pass"
updated = replace_content(source, 1, 4, "def a:\n  return True\n\ndef b:")
assert updated == "def a:\n  return True\n\ndef b:\n  pass"
```

The first and last lines of the new content must match the lines at the edges
of the region; otherwise `replace_content` raises `ValueError` explaining the
mismatch.

Turning completion messages into chat messages:

```python
from kwaak.chat_message import ChatMessage, ChatRole
from kwaak.completion import ToolCall, ToolOutput, ToolOutputMessage

call = ToolCall(id="1", name="run_tests")
message = ChatMessage.from_completion(ToolOutputMessage(call, ToolOutput("ok")))
assert message.role is ChatRole.TOOL
assert message.content == "tool `run_tests` completed"
assert message.maybe_completed_tool_call() == call
```

Collecting responses on a queue:

```python
import queue

from kwaak.commands.responder import CommandResponseKind, QueueResponder

responses = queue.Queue()
QueueResponder(responses).rename_chat("Add a README")
response = responses.get_nowait()
assert response.kind is CommandResponseKind.RENAME_CHAT
assert response.payload == "Add a README"
```

Reading command-line options:

```python
from kwaak.cli import parse_args

args = parse_args(["--skip-indexing"])
assert args.skip_indexing and args.command == "tui"
```

## What the package does not do

- It has no terminal interface and installs no command. `parse_args` only
  parses the options and subcommands (`init`, `tui`, `query`, `run-agent`,
  `index`, `test-tool`, `print-config`, `clear-cache`, `eval patch`); nothing
  in the package carries them out.
- It does not dispatch `CommandEvent`s: there is no backend loop that runs
  commands, starts or stops agents, or produces diffs.
- It talks to no model, container, GitHub or search service itself. Models,
  executors and GitHub sessions are passed in by the caller, and there are no
  web-fetching, web-search, GitHub-search, code-explanation or pull-request
  tools.
- It does not index or query a project, and keeps no chat history of its own.