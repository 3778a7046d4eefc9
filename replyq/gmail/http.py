"""
Authenticated GET helper shared by the Gmail and People API clients.

Maps transport and HTTP failures onto the pipeline's error taxonomy so callers
only ever see ReplyAssistError subclasses.
"""

from __future__ import annotations

from typing import Any

import requests

from replyq.exceptions import AuthFailure, NetworkFailure
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter, log_event

logger = get_logger(__name__)

_AUTH_STATUSES = {401, 403}


def bearer_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def get_json(
    session: requests.Session,
    url: str,
    token: str,
    params: dict[str, str] | None = None,
    stage: str = "google",
) -> tuple[int, Any]:
    """
    GET a Google API resource and return (status_code, decoded JSON body).

    Non-auth HTTP errors are returned to the caller (with the body, or None when
    it isn't JSON) so it can decide what a 404 means.

    Raises:
        AuthFailure: On 401/403
        NetworkFailure: On transport errors
    """
    try:
        response = session.get(url, headers=bearer_headers(token), params=params)
    except requests.RequestException as e:
        counter(f"{stage}.network_error")
        log_event(f"{stage}.network_error", error=type(e).__name__)
        raise NetworkFailure(f"Request to {stage} failed: {e}") from e

    if response.status_code in _AUTH_STATUSES:
        counter(f"{stage}.auth_error")
        logger.warning("%s rejected credentials (HTTP %d)", stage, response.status_code)
        raise AuthFailure(f"{stage} rejected the access token (HTTP {response.status_code})")

    try:
        body = response.json()
    except ValueError:
        body = None
    return response.status_code, body
