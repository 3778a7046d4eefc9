"""
Context composer: thread + identity + user instructions -> prompt string.

Pure functions only. The prompt is bounded by keeping the last few messages
and capping each body, since the generation endpoint enforces no size limit
of its own.
"""

from __future__ import annotations

from collections.abc import Sequence

from replyq.config import (
    MESSAGE_MAX_CHARS,
    RECENT_MESSAGE_COUNT,
    SNIPPET_CHARS,
    TRUNCATION_MARKER,
)
from replyq.llm.prompts import REPLY_PROMPT, PromptLoader, get_prompt_loader
from replyq.storage.models import Message, Thread


def select_recent(messages: Sequence[Message], count: int = RECENT_MESSAGE_COUNT) -> list[Message]:
    """Last `count` messages (all of them when the thread is shorter), order kept."""
    if count <= 0:
        return []
    return list(messages[-count:])


def truncate_body(body: str, max_chars: int = MESSAGE_MAX_CHARS) -> str:
    """Cap a body at max_chars, appending the truncation marker only when cut."""
    if len(body) <= max_chars:
        return body
    return body[:max_chars] + TRUNCATION_MARKER


def format_recent_messages(messages: Sequence[Message], max_chars: int = MESSAGE_MAX_CHARS) -> str:
    blocks = [
        f"Message {i} from {message.from_address}:\n{truncate_body(message.body, max_chars)}"
        for i, message in enumerate(messages, start=1)
    ]
    return "\n\n".join(blocks)


def compose(
    thread: Thread,
    user_identity: str,
    user_instructions: str = "",
    loader: PromptLoader | None = None,
) -> str:
    """
    Build the reply prompt.

    Args:
        thread: Resolved conversation (non-empty)
        user_identity: First name of the user the reply is written as
        user_instructions: Free text from the user, embedded verbatim

    Returns:
        Prompt string; identical inputs always give the identical prompt
    """
    loader = loader or get_prompt_loader()
    recent = select_recent(thread.messages)
    last = thread.last_message

    return loader.render(
        REPLY_PROMPT,
        user_name=user_identity,
        last_from=last.from_address,
        last_subject=last.subject,
        snippet=last.body[:SNIPPET_CHARS],
        recent_count=RECENT_MESSAGE_COUNT,
        recent_messages=format_recent_messages(recent),
        user_instructions=(user_instructions or "").strip(),
    )
