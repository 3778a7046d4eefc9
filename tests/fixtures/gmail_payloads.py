"""
Gmail payload builders and a scripted HTTP session for tests.

Responses are real requests.Response objects so status handling, .ok and
.json() behave exactly as they do against the live APIs.
"""

from __future__ import annotations

import base64
import json
from typing import Any

import requests

GMAIL_API = "https://gmail.test/gmail/v1/users/me"
PEOPLE_API = "https://people.test/v1/people/me"
BACKEND_URL = "http://backend.test/generate"


def encode_body(text: str) -> str:
    """Encode text the way Gmail does (URL-safe base64)."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def gmail_message(
    message_id: str,
    sender: str = "alice@x.com",
    subject: str = "Meeting",
    body: str | None = "Hello",
    date: str = "Mon, 6 May 2024 09:00:00 +0000",
    parts: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "mimeType": "text/plain" if parts is None else "multipart/alternative",
        "headers": [
            {"name": "From", "value": sender},
            {"name": "Subject", "value": subject},
            {"name": "Date", "value": date},
        ],
        "body": {"data": encode_body(body)} if body is not None else {"size": 0},
    }
    if parts is not None:
        payload["parts"] = parts
    return {"id": message_id, "threadId": "thread-1", "payload": payload}


def json_response(status_code: int = 200, payload: Any = None, reason: str = "OK") -> requests.Response:
    """Build a requests.Response; str/bytes payloads are used as the raw body."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    if isinstance(payload, str):
        response._content = payload.encode()
    elif isinstance(payload, bytes):
        response._content = payload
    else:
        response._content = json.dumps(payload).encode()
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """
    Scripted stand-in for requests.Session.

    Each (method, url) maps to a queue of outcomes. A Response is returned, an
    exception is raised and a callable is invoked with the request kwargs. The
    last outcome in a queue repeats.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def add(self, method: str, url: str, *outcomes: Any) -> None:
        self.routes.setdefault((method.upper(), url), []).extend(outcomes)

    def calls_to(self, url: str) -> list[tuple[str, str, dict[str, Any]]]:
        return [call for call in self.calls if call[1] == url]

    def _dispatch(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append((method, url, kwargs))
        queue = self.routes.get((method, url))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return outcome(**kwargs)
        return outcome

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        return self._dispatch("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> requests.Response:
        return self._dispatch("POST", url, **kwargs)
