"""Commands run before an agent starts, to prepare its git environment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from kwaak.execution import Command, ToolExecutor

logger = logging.getLogger(__name__)


class GithubSession(Protocol):
    def add_token_to_url(self, url: str) -> str: ...


@dataclass
class AgentEnvironment:
    """Where the agent starts from, returned after setup."""

    branch_name: str = ""
    start_ref: str = ""
    remote_enabled: bool = False


@dataclass
class EnvSetup:
    """Configures git, and github if available, for the agent to run in.

    The full setup only runs inside a docker container; otherwise only the current
    branch and ref are looked up.
    """

    executor: ToolExecutor
    docker: bool
    agent_user_name: str
    agent_user_email: str
    github_session: GithubSession | None = None

    async def exec_setup_commands(self, branch_name: str) -> AgentEnvironment:
        if not self.docker:
            return AgentEnvironment(
                branch_name=await self._current_branch(),
                start_ref=await self._current_ref(),
                remote_enabled=False,
            )

        remote_enabled = True
        try:
            await self._setup_github_auth()
        except Exception as exc:
            logger.warning("Failed to setup github auth: %s", exc)
            remote_enabled = False

        await self._configure_git_user()
        await self._switch_to_work_branch(branch_name)

        return AgentEnvironment(
            branch_name=await self._current_branch(),
            start_ref=await self._current_ref(),
            remote_enabled=remote_enabled,
        )

    async def _setup_github_auth(self) -> None:
        if self.github_session is None:
            raise RuntimeError("Github session is required to setup github auth")

        try:
            origin_url = (
                await self.executor.exec_cmd(Command.shell("git remote get-url origin"))
            ).output
        except Exception as exc:
            raise RuntimeError(
                "Could not get origin url; does the repository have a remote of origin "
                "enabled? Github integration will be disabled"
            ) from exc

        url_with_token = self.github_session.add_token_to_url(origin_url)
        await self.executor.exec_cmd(
            Command.shell(f"git remote set-url origin {url_with_token}")
        )

    async def _configure_git_user(self) -> None:
        for cmd in (
            Command.shell(f'git config --global user.name "{self.agent_user_name}"'),
            Command.shell(f'git config --global user.email "{self.agent_user_email}"'),
            Command.shell("git config --global push.autoSetupRemote true"),
        ):
            await self.executor.exec_cmd(cmd)

    async def _switch_to_work_branch(self, branch_name: str) -> None:
        await self.executor.exec_cmd(Command.shell(f"git checkout -b {branch_name}"))

    async def _current_ref(self) -> str:
        output = await self.executor.exec_cmd(Command.shell("git rev-parse HEAD"))
        ref = output.output.strip()
        logger.debug("agent starting from ref: %s", ref)
        return ref

    async def _current_branch(self) -> str:
        output = await self.executor.exec_cmd(Command.shell("git rev-parse --abbrev-ref HEAD"))
        branch = output.output.strip()
        logger.debug("agent starting from branch: %s", branch)
        return branch