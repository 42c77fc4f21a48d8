"""Tools the agent uses to read, write and search the project."""

from __future__ import annotations

from dataclasses import dataclass

from kwaak.agent.replace_lines import _parse_line_number, _split_lines
from kwaak.completion import ToolOutput
from kwaak.execution import Command, NonZeroExit, ToolExecutor, accept_non_zero_exit


async def read_file(context: ToolExecutor, file_name: str) -> ToolOutput:
    """Read a file; a failure such as a missing file is returned as output."""
    output = await accept_non_zero_exit(context.exec_cmd(Command.read_file(file_name)))
    return ToolOutput(output.output)


async def read_file_with_line_numbers(context: ToolExecutor, file_name: str) -> ToolOutput:
    """Read a file with each line prefixed by its 1-based number and a bar."""
    output = await accept_non_zero_exit(context.exec_cmd(Command.read_file(file_name)))
    numbered = (f"{number}|{line}" for number, line in enumerate(_split_lines(output.output), 1))
    return ToolOutput("\n".join(numbered))


async def write_file(context: ToolExecutor, file_name: str, content: str) -> ToolOutput:
    """Overwrite a file with the given content."""
    await context.exec_cmd(Command.write_file(file_name, content))
    return ToolOutput(f"File written successfully to {file_name}")


async def search_file(context: ToolExecutor, file_name: str) -> ToolOutput:
    """Find files whose path matches, using fd."""
    cmd = Command.shell(f"fd -E '.git/*' -iH --full-path '{file_name}'")
    output = await accept_non_zero_exit(context.exec_cmd(cmd))
    return ToolOutput(output.output)


async def search_code(context: ToolExecutor, query: str) -> ToolOutput:
    """Search the project for literal code with ripgrep."""
    cmd = Command.shell(f"rg -g '!.git' -i. -F '{query}'")
    output = await accept_non_zero_exit(context.exec_cmd(cmd))
    return ToolOutput(output.output)


async def add_lines(
    context: ToolExecutor, file_name: str, start_line: str, content: str
) -> ToolOutput:
    """Insert content after the given 1-based line number."""
    try:
        file_content = (await context.exec_cmd(Command.read_file(file_name))).output
    except NonZeroExit as exc:
        return ToolOutput(exc.output.output)

    lines = _split_lines(file_content)

    start = _parse_line_number(start_line)
    if start is None:
        return ToolOutput("Invalid start line number, must be a valid number greater than 0")

    if start > len(lines):
        return ToolOutput("Start or end line number is out of bounds")

    if start == 0:
        return ToolOutput("Start line number must be greater than 0")

    lines.insert(start, content)
    await context.exec_cmd(Command.write_file(file_name, "\n".join(lines)))

    return ToolOutput(
        f"Successfully added content to {file_name} at line {start}. Before making new "
        "edits, you MUST read the file again, as the line numbers WILL have changed."
    )


@dataclass(frozen=True)
class ResetFile:
    """Resets a file to its state at the ref the agent started from."""

    start_ref: str

    async def reset_file(self, context: ToolExecutor, file_name: str) -> ToolOutput:
        cmd = Command.shell(f"git checkout {self.start_ref} -- {file_name}")
        output = await accept_non_zero_exit(context.exec_cmd(cmd))
        return ToolOutput(output.output)


@dataclass(frozen=True)
class RunTests:
    """Runs the project's test command."""

    test_command: str

    async def run_tests(self, context: ToolExecutor) -> ToolOutput:
        output = await accept_non_zero_exit(context.exec_cmd(Command.shell(self.test_command)))
        return ToolOutput(output.output)


@dataclass(frozen=True)
class RunCoverage:
    """Runs the project's coverage command, which also runs the tests."""

    coverage_command: str

    async def run_coverage(self, context: ToolExecutor) -> ToolOutput:
        output = await accept_non_zero_exit(
            context.exec_cmd(Command.shell(self.coverage_command))
        )
        return ToolOutput(output.output)