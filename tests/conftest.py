"""
Pytest configuration for ReplyQ tests

Shared fixtures: scripted HTTP session, Gmail payload builders and an
isolated database file per test. Telemetry counters are reset around
every test.
"""

from __future__ import annotations

import pytest
from fixtures.gmail_payloads import FakeSession, gmail_message, json_response

from replyq.observability.telemetry import reset_telemetry


@pytest.fixture(autouse=True)
def reset_counters():
    reset_telemetry()
    yield
    reset_telemetry()


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def make_message():
    return gmail_message


@pytest.fixture
def make_response():
    return json_response


@pytest.fixture
def db_path(tmp_path):
    """Isolated SQLite file per test"""
    return tmp_path / "replyq_test.db"
