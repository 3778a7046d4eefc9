"""Tests for first-name resolution and its persisted cache."""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from fixtures.gmail_payloads import PEOPLE_API

from replyq.exceptions import AuthFailure, NetworkFailure
from replyq.gmail.auth import StaticTokenProvider
from replyq.gmail.identity import IdentityResolver
from replyq.storage.identity_cache import IdentityCache
from replyq.storage.models import IdentityRecord

PROFILE = {"resourceName": "people/me", "names": [{"givenName": "Sam", "familyName": "Lee"}]}


@pytest.fixture
def cache(db_path):
    return IdentityCache(db_path)


def test_lookup_then_cache_hit(cache, fake_session, make_response):
    fake_session.add("GET", PEOPLE_API, make_response(200, PROFILE))
    resolver = IdentityResolver(cache=cache, session=fake_session, people_url=PEOPLE_API)

    assert resolver.resolve_first_name(StaticTokenProvider("tok")) == "Sam"

    (_, _, kwargs), = fake_session.calls
    assert kwargs["params"] == {"personFields": "names"}
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}


def test_cached_name_needs_no_token_or_network(db_path, fake_session, make_response):
    fake_session.add("GET", PEOPLE_API, make_response(200, PROFILE))
    IdentityResolver(cache=IdentityCache(db_path), session=fake_session, people_url=PEOPLE_API).resolve_first_name(
        StaticTokenProvider("tok")
    )

    # Fresh resolver and cache over the same file: persisted across instances.
    tokens = Mock()
    second = IdentityResolver(cache=IdentityCache(db_path), session=fake_session, people_url=PEOPLE_API)

    assert second.resolve_first_name(tokens) == "Sam"
    tokens.get_token.assert_not_called()
    assert len(fake_session.calls) == 1


@pytest.mark.parametrize("profile", [{}, {"names": []}, {"names": [{"familyName": "Lee"}]}])
def test_missing_name_is_empty_and_not_cached(cache, fake_session, make_response, profile):
    fake_session.add("GET", PEOPLE_API, make_response(200, profile))
    resolver = IdentityResolver(cache=cache, session=fake_session, people_url=PEOPLE_API)

    assert resolver.resolve_first_name(StaticTokenProvider("tok")) == ""
    assert cache.get() is None


def test_lookup_failure(cache, fake_session, make_response):
    fake_session.add("GET", PEOPLE_API, make_response(500, {}))
    resolver = IdentityResolver(cache=cache, session=fake_session, people_url=PEOPLE_API)

    with pytest.raises(NetworkFailure, match="Failed to fetch user profile"):
        resolver.resolve_first_name(StaticTokenProvider("tok"))


def test_missing_token_on_cache_miss(cache, fake_session):
    resolver = IdentityResolver(cache=cache, session=fake_session, people_url=PEOPLE_API)

    with pytest.raises(AuthFailure):
        resolver.resolve_first_name(StaticTokenProvider(None))

    assert fake_session.calls == []


class TestIdentityCache:
    def test_empty_cache(self, cache):
        assert cache.get() is None

    def test_last_write_wins(self, cache):
        cache.put(IdentityRecord(first_name="Sam"))
        cache.put(IdentityRecord(first_name="Samantha"))

        assert cache.get() == IdentityRecord(first_name="Samantha")

    def test_clear(self, cache):
        cache.put(IdentityRecord(first_name="Sam"))
        cache.clear()

        assert cache.get() is None
