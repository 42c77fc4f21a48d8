import pytest

from kwaak.agent.summarizers import (
    ConversationSummarizer,
    ToolSummarizer,
    filter_messages_since_summary,
    tool_summary_prompt,
)
from kwaak.completion import (
    AssistantMessage,
    SummaryMessage,
    SystemMessage,
    Tool,
    ToolCall,
    ToolOutput,
    UserMessage,
)
from kwaak.execution import CommandKind, CommandOutput, NonZeroExit

DIFF = "diff --git a/some_file b/some_file\n-old\n+new"


class FakeContext:
    def __init__(self, diff="", history=None, fail=False):
        self.diff = diff
        self.fail = fail
        self.commands = []
        self._history = list(history or [])
        self.added = []

    async def exec_cmd(self, cmd):
        self.commands.append(cmd)
        if self.fail:
            raise NonZeroExit(self.diff)
        return CommandOutput(self.diff)

    async def history(self):
        return list(self._history)

    async def add_message(self, message):
        self.added.append(message)


class FakeCompletion:
    def __init__(self, answer="# Summary\nall good"):
        self.answer = answer
        self.calls = []

    async def complete(self, messages):
        self.calls.append(messages)
        return self.answer


class FakePrompt:
    def __init__(self, answer="refined"):
        self.answer = answer
        self.prompts = []

    async def prompt(self, prompt):
        self.prompts.append(prompt)
        return self.answer


TOOLS = [
    Tool("search_file", "Searches for a file\nwith more details"),
    Tool("run_tests", "Runs tests"),
    Tool("run_coverage", "Get coverage"),
]


def test_filter_without_summary_keeps_everything():
    messages = [SystemMessage("sys"), UserMessage("hi"), AssistantMessage("hello")]
    assert filter_messages_since_summary(messages) == messages


def test_filter_keeps_system_and_messages_after_last_summary():
    messages = [
        SystemMessage("sys"),
        UserMessage("old"),
        SummaryMessage("first"),
        AssistantMessage("between"),
        SummaryMessage("second"),
        UserMessage("new"),
    ]
    assert filter_messages_since_summary(messages) == [
        SystemMessage("sys"),
        SummaryMessage("second"),
        UserMessage("new"),
    ]


def test_conversation_prompt_with_and_without_diff():
    summarizer = ConversationSummarizer(FakeCompletion(), TOOLS, "abc123", 1)
    with_diff = summarizer.prompt(DIFF)
    without = summarizer.prompt("")
    assert "## Current changes made" in with_diff
    assert DIFF in with_diff
    assert "## Current changes made" not in without
    assert with_diff.startswith("# Goal")


def test_conversation_prompt_lists_first_description_line():
    prompt = ConversationSummarizer(FakeCompletion(), TOOLS, "abc", 1).prompt()
    assert "- **search_file**: Searches for a file" in prompt
    assert "with more details" not in prompt


@pytest.mark.asyncio
async def test_conversation_summary_waits_for_threshold():
    llm = FakeCompletion()
    context = FakeContext(diff=DIFF, history=[SystemMessage("sys"), UserMessage("do it")])
    summarizer = ConversationSummarizer(llm, TOOLS, "abc123", 2)

    assert await summarizer.summarize(context) is None
    assert await summarizer.summarize(context) is None
    assert llm.calls == []

    result = await summarizer.summarize(context)
    assert result == "# Summary\nall good"
    assert context.added == [SummaryMessage("# Summary\nall good")]
    assert context.commands[0].kind is CommandKind.SHELL
    assert context.commands[0].argument == "git diff abc123 --no-color"

    sent = llm.calls[0]
    assert sent[:2] == [SystemMessage("sys"), UserMessage("do it")]
    assert isinstance(sent[-1], UserMessage)
    assert DIFF in sent[-1].content
    assert summarizer.num_completions_since_summary == 0


@pytest.mark.asyncio
async def test_conversation_summary_without_answer_adds_nothing():
    llm = FakeCompletion(answer=None)
    context = FakeContext(fail=True, diff="fatal")
    summarizer = ConversationSummarizer(llm, TOOLS, "abc", 0)
    assert await summarizer.summarize(context) is None
    assert context.added == []
    assert len(llm.calls) == 1


def test_tool_prompt_includes_call_details_and_diff():
    call = ToolCall("1", "search_file", '{"query":"some_file"}')
    prompt = tool_summary_prompt(TOOLS[0], call, ToolOutput("Found it! {x}"), TOOLS, DIFF)
    assert "Tool name: search_file" in prompt
    assert 'Tool was called with arguments: {"query":"some_file"}' in prompt
    assert "Found it! {x}" in prompt
    assert "## The agent has made the following changes" in prompt
    assert "## Additional instructions" not in prompt


def test_tool_prompt_additional_instructions_for_run_tests():
    call = ToolCall("2", "run_tests")
    prompt = tool_summary_prompt(TOOLS[1], call, ToolOutput("ok"), TOOLS, None)
    assert "## Additional instructions" in prompt
    assert "## The agent has made the following changes" not in prompt

    only_tests = [TOOLS[1]]
    assert "## Additional instructions" not in tool_summary_prompt(
        TOOLS[1], call, ToolOutput("ok"), only_tests, None
    )


@pytest.mark.asyncio
async def test_tool_summarizer_ignores_other_tools():
    llm = FakePrompt()
    summarizer = ToolSummarizer(llm, ["run_tests"], TOOLS, "abc")
    output = ToolOutput("raw")
    result = await summarizer.summarize(FakeContext(), ToolCall("1", "search_file"), output)
    assert result == output
    assert llm.prompts == []


@pytest.mark.asyncio
async def test_tool_summarizer_passes_errors_through():
    llm = FakePrompt()
    summarizer = ToolSummarizer(llm, ["run_tests"], TOOLS, "abc")
    error = RuntimeError("boom")
    assert await summarizer.summarize(FakeContext(), ToolCall("1", "run_tests"), error) is error
    assert llm.prompts == []


@pytest.mark.asyncio
async def test_tool_summarizer_replaces_output():
    llm = FakePrompt(answer="refined")
    context = FakeContext(diff="")
    summarizer = ToolSummarizer(llm, ["run_tests", "run_coverage"], TOOLS, "start")
    result = await summarizer.summarize(context, ToolCall("1", "run_tests"), ToolOutput("3 failed"))
    assert result == ToolOutput("refined")
    assert "3 failed" in llm.prompts[0]
    assert "## The agent has made the following changes" not in llm.prompts[0]
    assert context.commands[0].argument == "git diff start --no-color"