"""Thread resolution against the Gmail REST API (read-only)

Given the message id found on the page, fetches the owning thread and rebuilds
its ordered message history:

1. messages.get?format=metadata -> threadId
2. threads.get?format=full -> messages with nested payloads

Credentials are supplied by the caller; this module never acquires them.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import requests

from replyq.config import GMAIL_API_BASE
from replyq.exceptions import EmptyThread, MalformedPayload, NetworkFailure, ThreadNotFound
from replyq.gmail.http import get_json
from replyq.gmail.parser import parse_thread_messages
from replyq.infrastructure.throttle import get_default_session
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter, log_event, time_block
from replyq.storage.models import Thread
from replyq.utils.redaction import redact

logger = get_logger(__name__)


class ThreadResolver:
    """
    Rebuilds a conversation from the message currently in view.

    Performs exactly two sequential reads per resolve; no retries.
    """

    def __init__(self, session: requests.Session | None = None, api_base: str = GMAIL_API_BASE):
        self.session = session or get_default_session()
        self.api_base = api_base.rstrip("/")

    def resolve(self, ref: str, auth_token: str) -> Thread:
        """
        Fetch the thread owning `ref` and parse every message in it.

        Args:
            ref: Gmail message id of the item in view
            auth_token: Bearer token for the Gmail API

        Returns:
            Thread with at least one message, in server order

        Raises:
            ThreadNotFound: Message unknown or metadata lacks a threadId
            EmptyThread: Thread response holds no messages
            MalformedPayload: Response or a message in it has the wrong shape
            AuthFailure: Token rejected
            NetworkFailure: Transport error or unexpected HTTP status
        """
        with time_block("gmail.resolve.latency"):
            thread_id = self._fetch_thread_id(ref, auth_token)
            raw_messages = self._fetch_thread_messages(thread_id, auth_token)

            messages = parse_thread_messages(raw_messages)
            if not messages:
                counter("gmail.resolve.empty_thread")
                log_event("gmail.resolve.empty_thread", thread_id_hash=redact(thread_id))
                raise EmptyThread()

        counter("gmail.resolve.success")
        log_event(
            "gmail.resolved",
            thread_id_hash=redact(thread_id),
            message_count=len(messages),
        )
        return Thread(thread_id=thread_id, messages=messages)

    def _fetch_thread_id(self, ref: str, auth_token: str) -> str:
        url = f"{self.api_base}/messages/{quote(ref, safe='')}"
        status, body = get_json(
            self.session, url, auth_token, params={"format": "metadata"}, stage="gmail"
        )
        if status == 404:
            raise ThreadNotFound()
        if status >= 400:
            raise NetworkFailure(f"Gmail returned HTTP {status} for message", status_code=status)

        thread_id = body.get("threadId") if isinstance(body, dict) else None
        if not thread_id:
            logger.warning("Message metadata has no threadId (ref=%s)", redact(ref))
            raise ThreadNotFound()
        return thread_id

    def _fetch_thread_messages(self, thread_id: str, auth_token: str) -> Any:
        url = f"{self.api_base}/threads/{quote(thread_id, safe='')}"
        status, body = get_json(
            self.session, url, auth_token, params={"format": "full"}, stage="gmail"
        )
        if status == 404:
            raise ThreadNotFound("Thread not found")
        if status >= 400:
            raise NetworkFailure(f"Gmail returned HTTP {status} for thread", status_code=status)

        if not isinstance(body, dict):
            raise MalformedPayload("Thread response is not a JSON object")
        return body.get("messages")
