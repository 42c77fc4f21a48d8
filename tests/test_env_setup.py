import pytest

from kwaak.agent.env_setup import AgentEnvironment, EnvSetup
from kwaak.execution import CommandError, CommandOutput, NonZeroExit, ToolExecutor


class FakeExecutor(ToolExecutor):
    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.commands: list[str] = []

    async def exec_cmd(self, cmd):
        self.commands.append(cmd.argument)
        result = self.responses.get(cmd.argument, "")
        if isinstance(result, Exception):
            raise result
        return CommandOutput(result)


class FakeSession:
    def add_token_to_url(self, url):
        return url.replace("https://", "https://token@")


class BrokenSession:
    def add_token_to_url(self, url):
        raise ValueError("bad url")


RESPONSES = {
    "git rev-parse HEAD": "abc123\n",
    "git rev-parse --abbrev-ref HEAD": "kwaak/work\n",
    "git remote get-url origin": "https://example.com/repo.git",
}


def make_setup(executor, docker=True, session=None):
    return EnvSetup(
        executor=executor,
        docker=docker,
        agent_user_name="kwaak",
        agent_user_email="agent@example.com",
        github_session=session,
    )


@pytest.mark.asyncio
async def test_local_executor_only_reads_git_state():
    executor = FakeExecutor(RESPONSES)
    env = await make_setup(executor, docker=False).exec_setup_commands("feature")
    assert env == AgentEnvironment("kwaak/work", "abc123", False)
    assert executor.commands == ["git rev-parse --abbrev-ref HEAD", "git rev-parse HEAD"]


@pytest.mark.asyncio
async def test_docker_with_github_session():
    executor = FakeExecutor(RESPONSES)
    env = await make_setup(executor, session=FakeSession()).exec_setup_commands("feature")
    assert env.remote_enabled is True
    assert env.start_ref == "abc123"
    assert env.branch_name == "kwaak/work"
    assert executor.commands == [
        "git remote get-url origin",
        "git remote set-url origin https://token@example.com/repo.git",
        'git config --global user.name "kwaak"',
        'git config --global user.email "agent@example.com"',
        "git config --global push.autoSetupRemote true",
        "git checkout -b feature",
        "git rev-parse --abbrev-ref HEAD",
        "git rev-parse HEAD",
    ]


@pytest.mark.asyncio
async def test_docker_without_session_disables_remote():
    executor = FakeExecutor(RESPONSES)
    env = await make_setup(executor).exec_setup_commands("feature")
    assert env.remote_enabled is False
    assert "git checkout -b feature" in executor.commands
    assert not any(c.startswith("git remote") for c in executor.commands)


@pytest.mark.asyncio
async def test_missing_origin_disables_remote():
    responses = dict(RESPONSES)
    responses["git remote get-url origin"] = NonZeroExit("no such remote")
    executor = FakeExecutor(responses)
    env = await make_setup(executor, session=FakeSession()).exec_setup_commands("feature")
    assert env.remote_enabled is False
    assert not any(c.startswith("git remote set-url") for c in executor.commands)


@pytest.mark.asyncio
async def test_token_failure_disables_remote():
    executor = FakeExecutor(RESPONSES)
    env = await make_setup(executor, session=BrokenSession()).exec_setup_commands("feature")
    assert env.remote_enabled is False
    assert env.start_ref == "abc123"


@pytest.mark.asyncio
async def test_failing_branch_switch_propagates():
    responses = dict(RESPONSES)
    responses["git checkout -b feature"] = CommandError("checkout failed")
    executor = FakeExecutor(responses)
    with pytest.raises(CommandError, match="checkout failed"):
        await make_setup(executor, session=FakeSession()).exec_setup_commands("feature")