"""Bearer credential providers for Google API calls.

The pipeline never acquires credentials on its own: callers hand it a
TokenProvider. Two implementations are provided:

- StaticTokenProvider: a token obtained elsewhere (e.g. by the browser extension)
- GoogleCredentialsTokenProvider: google-auth Credentials, refreshed when expired
"""

from __future__ import annotations

from typing import Protocol

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from replyq.exceptions import AuthFailure
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter, log_event

logger = get_logger(__name__)


class TokenProvider(Protocol):
    def get_token(self) -> str:
        """Return a bearer token or raise AuthFailure."""
        ...


class StaticTokenProvider:
    """Hands out a token that was acquired outside the pipeline."""

    def __init__(self, token: str | None):
        self._token = token

    def get_token(self) -> str:
        if not self._token:
            raise AuthFailure("No access token available")
        return self._token


class GoogleCredentialsTokenProvider:
    """
    Wraps google-auth OAuth2 credentials.

    Expired credentials are refreshed in place before the token is returned.
    """

    def __init__(self, credentials: Credentials):
        self.credentials = credentials

    def get_token(self) -> str:
        """
        Return a valid access token.

        Raises:
            AuthFailure: If credentials are expired and cannot be refreshed

        Side Effects:
            - May call Google's OAuth2 token endpoint to refresh
            - Increments telemetry counter (oauth.token_refreshed)
        """
        if not self.credentials.valid:
            if not self.credentials.refresh_token:
                raise AuthFailure("Credentials expired and no refresh token is available")
            try:
                self.credentials.refresh(Request())
            except RefreshError as e:
                logger.error("Failed to refresh credentials: %s", e)
                log_event("oauth.refresh_failed", error=str(e))
                raise AuthFailure(f"Failed to refresh credentials: {e}") from e
            counter("oauth.token_refreshed")
            logger.info("Refreshed OAuth access token")

        if not self.credentials.token:
            raise AuthFailure("Credentials have no access token")
        return self.credentials.token
