"""Builds the bounded prompt handed to the generation backend."""

from __future__ import annotations

from replyq.drafting.composer import compose, format_recent_messages, select_recent, truncate_body

__all__ = ["compose", "format_recent_messages", "select_recent", "truncate_body"]
