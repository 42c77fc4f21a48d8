import pytest

from kwaak.execution import (
    Command,
    CommandError,
    CommandKind,
    CommandOutput,
    NonZeroExit,
    ToolExecutor,
    accept_non_zero_exit,
)


class _ScriptedExecutor(ToolExecutor):
    def __init__(self, result):
        self.result = result
        self.seen = []

    async def exec_cmd(self, cmd):
        self.seen.append(cmd)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def test_shell_command():
    cmd = Command.shell("git rev-parse HEAD")
    assert cmd.kind is CommandKind.SHELL
    assert cmd.argument == "git rev-parse HEAD"
    assert cmd.content is None


def test_read_and_write_file_commands():
    assert Command.read_file("a.txt") == Command(CommandKind.READ_FILE, "a.txt")
    write = Command.write_file("a.txt", "hello")
    assert write.kind is CommandKind.WRITE_FILE
    assert write.content == "hello"


def test_tool_executor_is_abstract():
    with pytest.raises(TypeError):
        ToolExecutor()


def test_non_zero_exit_wraps_string_output():
    err = NonZeroExit("boom")
    assert err.output == CommandOutput("boom")
    assert isinstance(err, CommandError)


@pytest.mark.asyncio
async def test_accept_non_zero_exit_passes_success():
    executor = _ScriptedExecutor(CommandOutput("ok"))
    out = await accept_non_zero_exit(executor.exec_cmd(Command.shell("true")))
    assert out.output == "ok"
    assert executor.seen == [Command.shell("true")]


@pytest.mark.asyncio
async def test_accept_non_zero_exit_returns_failed_output():
    executor = _ScriptedExecutor(NonZeroExit(CommandOutput("failed tests")))
    out = await accept_non_zero_exit(executor.exec_cmd(Command.shell("false")))
    assert str(out) == "failed tests"


@pytest.mark.asyncio
async def test_accept_non_zero_exit_reraises_other_errors():
    executor = _ScriptedExecutor(CommandError("no such container"))
    with pytest.raises(CommandError, match="no such container"):
        await accept_non_zero_exit(executor.exec_cmd(Command.shell("ls")))