"""
Resolves the signed-in user's first name for the reply signature.

The name comes from the Google People API and is cached in the project
database under a fixed key, so after the first successful lookup no token is
requested and no network call is made.
"""

from __future__ import annotations

import requests

from replyq.config import PEOPLE_API_URL
from replyq.exceptions import NetworkFailure
from replyq.gmail.auth import TokenProvider
from replyq.gmail.http import get_json
from replyq.infrastructure.throttle import get_default_session
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter
from replyq.storage.identity_cache import IdentityCache
from replyq.storage.models import IdentityRecord

logger = get_logger(__name__)


class IdentityResolver:
    def __init__(
        self,
        cache: IdentityCache | None = None,
        session: requests.Session | None = None,
        people_url: str = PEOPLE_API_URL,
    ):
        self.cache = cache or IdentityCache()
        self.session = session or get_default_session()
        self.people_url = people_url

    def resolve_first_name(self, token_provider: TokenProvider) -> str:
        """
        Return the user's first name, from cache when possible.

        Raises:
            AuthFailure: Token unavailable or rejected
            NetworkFailure: Lookup failed

        Side Effects:
            - On cache miss: acquires a token, calls the People API, writes the cache
        """
        cached = self.cache.get()
        if cached is not None:
            logger.debug("Using cached first name")
            return cached.first_name

        token = token_provider.get_token()
        first_name = self._lookup_first_name(token)

        # Empty names are not cached so the next run tries again.
        if first_name:
            self.cache.put(IdentityRecord(first_name=first_name))
        return first_name

    def _lookup_first_name(self, token: str) -> str:
        counter("identity.lookup")
        status, body = get_json(
            self.session, self.people_url, token, params={"personFields": "names"}, stage="people"
        )
        if status >= 400:
            raise NetworkFailure("Failed to fetch user profile", status_code=status)

        names = body.get("names") if isinstance(body, dict) else None
        if not names:
            return ""
        return names[0].get("givenName") or ""
