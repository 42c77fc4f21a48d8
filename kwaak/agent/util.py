"""Naming chats and branches with a fast model."""

from __future__ import annotations

import uuid as uuid_module
from typing import Protocol

from kwaak.commands.responder import Responder


class SimplePrompt(Protocol):
    async def prompt(self, prompt: str) -> str: ...


async def _ask(fast_query_provider: SimplePrompt, prompt: str) -> str:
    try:
        return await fast_query_provider.prompt(prompt)
    except Exception as exc:
        raise RuntimeError("Could not get chat name") from exc


async def rename_chat(
    query: str, fast_query_provider: SimplePrompt, command_responder: Responder
) -> None:
    """Ask for a short chat title and pass it to the responder."""
    answer = await _ask(
        fast_query_provider,
        "Give a good, short, max 60 chars title for the following query. "
        f"Only respond with the title.:\n{query}",
    )
    chat_name = answer.strip('"')[:60]
    command_responder.rename_chat(chat_name)


async def create_branch_name(
    query: str,
    uuid: uuid_module.UUID,
    fast_query_provider: SimplePrompt,
    command_responder: Responder,
) -> str:
    """Ask for a branch name, sanitise it, report it and return it."""
    answer = await _ask(
        fast_query_provider,
        "Give a good, short, max 30 chars git-branch-name for the following query. "
        f"Only respond with the git-branch-name.:\n{query}",
    )
    name = answer.strip('"')[:30]
    name = "".join(c for c in name if c.isascii()).lower()
    name = "".join(c if c.isalnum() else "-" for c in name)

    branch_name = f"kwaak/{name}-{str(uuid)[:8]}"
    command_responder.rename_branch(branch_name)
    return branch_name