"""
Client-side pacing for outbound HTTP calls.

Every request the pipeline makes (Gmail reads, the People lookup and the
generation POST) waits a fixed delay first. This is a simple spacer, not a
backoff: failures are never retried.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import requests

from replyq.config import REQUEST_DELAY_SECONDS
from replyq.observability.telemetry import counter


@dataclass
class RequestThrottle:
    delay_seconds: float = REQUEST_DELAY_SECONDS
    sleep_fn: Callable[[float], None] = time.sleep

    def wait(self) -> None:
        """Block for the configured delay before an outbound call.

        Side Effects:
            - Sleeps via sleep_fn
            - Increments telemetry counter (throttle.waits)
        """
        counter("throttle.waits")
        if self.delay_seconds > 0:
            self.sleep_fn(self.delay_seconds)


class ThrottledSession(requests.Session):
    """requests.Session that waits on a RequestThrottle before every request."""

    def __init__(self, throttle: RequestThrottle | None = None):
        super().__init__()
        self.throttle = throttle or RequestThrottle()

    def request(self, method: str | bytes, url: str | bytes, *args: Any, **kwargs: Any) -> requests.Response:
        self.throttle.wait()
        return super().request(method, url, *args, **kwargs)


@lru_cache(maxsize=1)
def get_default_session() -> ThrottledSession:
    """Process-wide throttled session shared by all pipeline stages."""
    return ThrottledSession()
