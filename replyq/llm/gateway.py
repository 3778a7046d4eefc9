"""
Generation gateway: the client side of the /generate backend.

At most one generation runs per process, across every gateway instance. The
guard is a module-level non-blocking lock: a second caller fails fast with
AlreadyInFlight instead of queueing, and the lock is released in `finally`
so no failure path can leave it held.

There is no retry and no timeout beyond the transport default; once the POST
is sent it runs to completion or failure.
"""

from __future__ import annotations

import threading
from functools import lru_cache
from typing import Any

import requests
from pydantic import ValidationError

from replyq.config import BACKEND_URL
from replyq.exceptions import AlreadyInFlight, BackendFailure, NetworkFailure
from replyq.infrastructure.throttle import get_default_session
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter, log_event, time_block
from replyq.storage.models import GenerationRequest, GenerationResponse
from replyq.utils.redaction import redact_prompt

logger = get_logger(__name__)

# Shared by every GenerationGateway in the process.
_GENERATION_LOCK = threading.Lock()


class GenerationGateway:
    def __init__(self, session: requests.Session | None = None, backend_url: str = BACKEND_URL):
        self.session = session or get_default_session()
        self.backend_url = backend_url
        self._in_flight = _GENERATION_LOCK

    @property
    def in_flight(self) -> bool:
        return self._in_flight.locked()

    def generate(self, prompt: str) -> str:
        """
        Send the prompt to the backend and return the generated reply text.

        Raises:
            AlreadyInFlight: Another generation is outstanding (no network call made)
            NetworkFailure: Transport error talking to the backend
            BackendFailure: Non-2xx status or malformed response body

        Side Effects:
            - One throttled HTTP POST to the backend
            - Telemetry counters (generation.*)
        """
        if not self._in_flight.acquire(blocking=False):
            counter("generation.rejected_in_flight")
            raise AlreadyInFlight()

        try:
            log_event("generation.start", prompt=redact_prompt(prompt))
            with time_block("generation.latency"):
                response = self._post(GenerationRequest(prompt=prompt))
            text = self._parse_response(response)
        finally:
            self._in_flight.release()

        counter("generation.success")
        return text

    def _post(self, request: GenerationRequest) -> requests.Response:
        try:
            return self.session.post(self.backend_url, json=request.model_dump())
        except requests.RequestException as e:
            counter("generation.network_error")
            logger.error("Generation backend unreachable: %s", e)
            raise NetworkFailure(f"Could not reach generation backend: {e}") from e

    def _parse_response(self, response: requests.Response) -> str:
        payload: Any
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            counter("generation.backend_error")
            detail = payload.get("error") if isinstance(payload, dict) else None
            message = detail or response.reason or f"HTTP {response.status_code}"
            log_event("generation.backend_error", status=response.status_code)
            raise BackendFailure(f"Backend error: {message}", status_code=response.status_code)

        try:
            return GenerationResponse.model_validate(payload).text
        except ValidationError as e:
            counter("generation.malformed_response")
            log_event("generation.malformed_response", error_count=len(e.errors()))
            raise BackendFailure(
                "Backend error: malformed response", status_code=response.status_code
            ) from e


@lru_cache(maxsize=1)
def get_generation_gateway() -> GenerationGateway:
    """Default gateway over the shared throttled session."""
    return GenerationGateway()
