"""
Gmail adapter utilities for converting thread payloads into domain models.

Parsing is deterministic and side-effect free apart from telemetry. Bodies are
reconstructed losslessly: every inline body in the payload tree is decoded and
concatenated in depth-first, parts-in-order order, so a multipart/alternative
message yields its text/plain and text/html parts back to back.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable, Mapping
from typing import Any

from replyq.exceptions import MalformedPayload
from replyq.observability.telemetry import counter
from replyq.storage.models import Message

_URLSAFE_TO_STANDARD = str.maketrans({"-": "+", "_": "/"})


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        counter("gmail.malformed_payload")
        raise MalformedPayload(f"Unexpected {what} in Gmail response")
    return value


def _require_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        counter("gmail.malformed_payload")
        raise MalformedPayload(f"Unexpected {what} in Gmail response")
    return value


def header_value(headers: Iterable[Mapping[str, Any]], name: str) -> str:
    """Value of the first header whose name matches exactly, or ''."""
    for header in headers:
        if _require_mapping(header, "header").get("name") == name:
            return header.get("value") or ""
    return ""


def decode_body_data(data: str) -> str:
    """Decode Gmail's URL-safe base64 body data into text."""
    if not isinstance(data, str):
        counter("gmail.body_decode_failed")
        raise MalformedPayload("Failed to decode message body")
    standard = data.translate(_URLSAFE_TO_STANDARD)
    padding = "=" * (-len(standard) % 4)
    try:
        decoded = base64.b64decode(standard + padding)
    except (binascii.Error, ValueError) as exc:
        counter("gmail.body_decode_failed")
        raise MalformedPayload("Failed to decode message body") from exc
    return decoded.decode("utf-8", errors="replace")


def decode_payload_body(payload: Mapping[str, Any]) -> str:
    """
    Concatenate every decoded inline body in the payload tree.

    Nodes are visited depth-first with children in order. The walk uses an
    explicit stack so deeply nested multiparts cannot exhaust the call stack.

    Raises:
        MalformedPayload: A node, body or parts list has the wrong shape
    """
    chunks: list[str] = []
    stack: list[Any] = [payload]
    while stack:
        node = _require_mapping(stack.pop(), "payload part")
        body = _require_mapping(node.get("body") or {}, "part body")
        data = body.get("data")
        if data:
            chunks.append(decode_body_data(data))
        parts = _require_list(node.get("parts"), "parts list")
        stack.extend(reversed(parts))
    return "".join(chunks)


def parse_thread_message(message: Mapping[str, Any]) -> Message:
    """Convert one message of a `threads.get?format=full` response into a Message."""
    message = _require_mapping(message, "message")
    payload = _require_mapping(message.get("payload") or {}, "message payload")
    headers = _require_list(payload.get("headers"), "header list")

    parsed = Message(
        id=str(message.get("id") or ""),
        from_address=header_value(headers, "From"),
        subject=header_value(headers, "Subject"),
        date=header_value(headers, "Date"),
        body=decode_payload_body(payload).strip(),
    )
    counter("gmail.parsed.count")
    return parsed


def parse_thread_messages(raw_messages: Any) -> tuple[Message, ...]:
    """Parse the `messages` array of a thread response, in server order."""
    return tuple(parse_thread_message(raw) for raw in _require_list(raw_messages, "messages list"))
