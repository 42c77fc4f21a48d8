"""Tool that replaces a region of lines in a file."""

from __future__ import annotations

import re

from kwaak.completion import ToolOutput
from kwaak.execution import Command, NonZeroExit, ToolExecutor

REPLACE_LINES_DESCRIPTION = """Replace lines in a file.

You MUST read the file with line numbers first BEFORE EVERY EDIT.

After editing, you MUST read the file again to get the new line numbers.

Line numbers are 1-indexed, you do not need to subtract 1 for start_line and end_line.

Do not include the line numbers in the content.

You MUST include a couple of lines BEFORE and AFTER the lines you want to replace.

The first and last lines of the content MUST NOT be blank (expand accordingly).

For example when making a modification to the following file:

2|def a:
3|  pass
4|
5|def b:
6|  pass

And you want to change line 3 to return True.

Valid values:

start_line: 2
end_line: 5
content:
```
def a:
  return True

def b:
```

Valid because the region is expanded to include lines 2 and 5. Expanding to just 4 would not be enough as it is blank.

Example of invalid values:

start_line: 3
end_line: 3
content:
```
  return True
```

Invalid because the region is not expanded to include lines 2 and 5.
"""

_UNSIGNED = re.compile(r"\+?[0-9]+")


def _split_lines(text: str) -> list[str]:
    """Split on newlines, dropping a final empty line and trailing carriage returns."""
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _parse_line_number(value: str) -> int | None:
    if _UNSIGNED.fullmatch(value) is None:
        return None
    return int(value)


async def replace_lines(
    context: ToolExecutor,
    file_name: str,
    start_line: str,
    end_line: str,
    content: str,
) -> ToolOutput:
    """Replace lines start_line..end_line (1-indexed, inclusive) of a file with content."""
    try:
        file_content = (await context.exec_cmd(Command.read_file(file_name))).output
    except NonZeroExit as exc:
        return ToolOutput(exc.output.output)

    lines_len = len(_split_lines(file_content))

    start = _parse_line_number(start_line)
    if start is None:
        return ToolOutput("Invalid start line number, must be a valid number greater than 0")

    end = _parse_line_number(end_line)
    if end is None:
        return ToolOutput("Invalid end line number, must be a valid number 0 or greater")

    if start > lines_len or end > lines_len:
        return ToolOutput(
            f"Start or end line number is out of bounds ({start} - {end}, max: {lines_len})"
        )

    if end > 0 and start > end:
        return ToolOutput("Start line number must be less than or equal to end line number")

    if start == 0:
        return ToolOutput("Start line number must be greater than 0")

    try:
        new_file_content = replace_content(file_content, start, end, content)
    except ValueError as exc:
        return ToolOutput(str(exc))

    await context.exec_cmd(Command.write_file(file_name, new_file_content))

    return ToolOutput(
        f"Successfully replaced content in {file_name}. Before making new edits, you MUST "
        "read the file again, as the line numbers WILL have changed."
    )


def replace_content(file_content: str, start_line: int, end_line: int, content: str) -> str:
    """Return file_content with the given line region replaced; raise ValueError on mismatch."""
    lines = _split_lines(file_content)
    content_lines = _split_lines(content)

    if not content_lines:
        raise ValueError("The content to replace the lines with must not be empty.")
    if not 1 <= start_line <= len(lines):
        raise ValueError(f"Start line number {start_line} is out of bounds (max: {len(lines)}).")
    if not 1 <= end_line <= len(lines):
        raise ValueError(f"End line number {end_line} is out of bounds (max: {len(lines)}).")

    first_line = lines[start_line - 1]
    content_first_line = content_lines[0]

    if start_line > 1 and content_first_line not in first_line:
        raise ValueError(
            f"The line on line number {start_line} reads: `{first_line}`, which does not "
            f"match the first line of the content: `{content_first_line}`."
        )

    last_line = lines[end_line - 1]
    content_last_line = content_lines[-1]

    if end_line < len(lines) and content_last_line not in last_line:
        raise ValueError(
            f"The line on line number {end_line} reads: `{last_line}`, which does not "
            f"match the last line of the content: `{content_last_line}`."
        )

    indentation_mismatch = max(first_line.find(content_first_line), 0)

    if indentation_mismatch > 0:
        indentation = (first_line[0] if first_line else " ") * indentation_mismatch
        content_lines = [indentation + line if line else line for line in content_lines]

    raw_lines = file_content.split("\n")
    prefix = raw_lines[: start_line - 1]
    suffix = raw_lines[end_line:]

    return "\n".join(prefix + content_lines + suffix)