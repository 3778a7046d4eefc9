"""
End-to-end pipeline runs against an HTML page snapshot and scripted
Gmail / People / backend responses.
"""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from fixtures.gmail_payloads import BACKEND_URL, GMAIL_API, PEOPLE_API

from replyq.exceptions import (
    AlreadyInFlight,
    BackendFailure,
    EmptyThread,
    LocatorNotFound,
    MalformedPayload,
    NoTargetSurface,
)
from replyq.gmail.auth import StaticTokenProvider
from replyq.gmail.identity import IdentityResolver
from replyq.gmail.thread_resolver import ThreadResolver
from replyq.host import DocumentHostSurface
from replyq.llm.gateway import GenerationGateway
from replyq.pipeline.reply_pipeline import (
    STATUS_INSERTED,
    STATUS_PREPARING,
    STATUS_REQUESTING,
    PipelineState,
    ReplyPipeline,
)
from replyq.pipeline.status import RecordingStatusReporter
from replyq.storage.identity_cache import IdentityCache

MESSAGE_URL = f"{GMAIL_API}/messages/msg-4"
THREAD_URL = f"{GMAIL_API}/threads/thread-1"
REPLY = "Hi Alice,\nFriday works for me.\nBest regards,\nSam"

PAGE_WITH_COMPOSE = """
<html><body>
  <div data-legacy-message-id="msg-4">Can we reschedule to Friday?</div>
  <div contenteditable="true" aria-label="Message Body"></div>
</body></html>
"""
PAGE_WITHOUT_COMPOSE = '<html><body><div data-legacy-message-id="msg-4">x</div></body></html>'
PAGE_WITHOUT_MESSAGE = "<html><body><p>Inbox</p></body></html>"


@pytest.fixture
def scripted(fake_session, make_message, make_response):
    """Four-message thread ending with Alice's reschedule request."""
    fake_session.add("GET", MESSAGE_URL, make_response(200, {"id": "msg-4", "threadId": "thread-1"}))
    fake_session.add(
        "GET",
        THREAD_URL,
        make_response(
            200,
            {
                "id": "thread-1",
                "messages": [
                    make_message("msg-1", sender="bob@x.com", subject="Sync", body="Kickoff notes"),
                    make_message("msg-2", sender="sam@x.com", subject="Re: Sync", body="Thursday works"),
                    make_message("msg-3", sender="bob@x.com", subject="Re: Sync", body="Booked"),
                    make_message(
                        "msg-4",
                        sender="alice@x.com",
                        subject="Re: Sync",
                        body="Can we reschedule to Friday?",
                    ),
                ],
            },
        ),
    )
    fake_session.add("GET", PEOPLE_API, make_response(200, {"names": [{"givenName": "Sam"}]}))
    fake_session.add("POST", BACKEND_URL, make_response(200, {"text": REPLY}))
    return fake_session


def _pipeline(page, session, db_path, **overrides):
    reporter = RecordingStatusReporter()
    parts = {
        "host": DocumentHostSurface(page),
        "token_provider": StaticTokenProvider("tok"),
        "resolver": ThreadResolver(session=session, api_base=GMAIL_API),
        "identity": IdentityResolver(cache=IdentityCache(db_path), session=session, people_url=PEOPLE_API),
        "gateway": GenerationGateway(session=session, backend_url=BACKEND_URL),
        "reporter": reporter,
    }
    parts.update(overrides)
    return ReplyPipeline(**parts), reporter


def test_reply_inserted_into_compose_box(scripted, db_path):
    pipeline, reporter = _pipeline(PAGE_WITH_COMPOSE, scripted, db_path)

    result = pipeline.run("Say yes")

    assert result.ok
    assert result.reply_text == REPLY
    assert result.stages == [
        PipelineState.LOCATING,
        PipelineState.RESOLVING,
        PipelineState.COMPOSING,
        PipelineState.GENERATING,
        PipelineState.INJECTING,
    ]
    assert reporter.messages == [STATUS_PREPARING, STATUS_REQUESTING, STATUS_INSERTED]
    assert result.state is PipelineState.IDLE
    assert pipeline.injector.host.find_reply_target().text() == REPLY

    (_, _, post_kwargs), = scripted.calls_to(BACKEND_URL)
    prompt = post_kwargs["json"]["prompt"]
    assert "as Sam" in prompt
    assert "alice@x.com" in prompt
    assert "Can we reschedule to Friday?" in prompt
    assert "Say yes" in prompt
    assert "Kickoff notes" not in prompt


def test_second_run_uses_cached_identity(scripted, db_path):
    _pipeline(PAGE_WITH_COMPOSE, scripted, db_path)[0].run()
    _pipeline(PAGE_WITH_COMPOSE, scripted, db_path)[0].run()

    assert len(scripted.calls_to(PEOPLE_API)) == 1
    assert len(scripted.calls_to(BACKEND_URL)) == 2


def test_no_message_in_view_makes_no_requests(scripted, db_path):
    pipeline, reporter = _pipeline(PAGE_WITHOUT_MESSAGE, scripted, db_path)

    result = pipeline.run()

    assert not result.ok
    assert isinstance(result.error, LocatorNotFound)
    assert result.failed_stage is PipelineState.LOCATING
    assert reporter.messages == ["Error: No message element found on page."]
    assert scripted.calls == []


def test_empty_thread_stops_before_composing(fake_session, make_response, db_path):
    fake_session.add("GET", MESSAGE_URL, make_response(200, {"threadId": "thread-1"}))
    fake_session.add("GET", THREAD_URL, make_response(200, {"id": "thread-1", "messages": []}))
    composer = Mock()
    pipeline, reporter = _pipeline(PAGE_WITH_COMPOSE, fake_session, db_path, composer=composer)

    result = pipeline.run()

    assert isinstance(result.error, EmptyThread)
    assert result.failed_stage is PipelineState.RESOLVING
    assert PipelineState.COMPOSING not in result.stages
    assert reporter.last == "Error: Thread empty"
    composer.assert_not_called()
    assert fake_session.calls_to(BACKEND_URL) == []


def test_generated_reply_without_compose_box(scripted, db_path):
    pipeline, reporter = _pipeline(PAGE_WITHOUT_COMPOSE, scripted, db_path)

    result = pipeline.run()

    assert not result.ok
    assert result.generation_succeeded
    assert result.reply_text == REPLY
    assert isinstance(result.error, NoTargetSurface)
    assert result.failed_stage is PipelineState.INJECTING
    assert reporter.last == "Reply generated, but no Gmail compose box was found."


def test_backend_failure_is_reported(scripted, make_response, db_path):
    scripted.routes[("POST", BACKEND_URL)] = [make_response(500, {"error": "quota exceeded"})]
    pipeline, reporter = _pipeline(PAGE_WITH_COMPOSE, scripted, db_path)

    result = pipeline.run()

    assert isinstance(result.error, BackendFailure)
    assert result.failed_stage is PipelineState.GENERATING
    assert not result.generation_succeeded
    assert reporter.last == "Error: Backend error: quota exceeded"
    assert not pipeline.gateway.in_flight


def test_run_while_generation_in_flight(scripted, db_path):
    gateway = GenerationGateway(session=scripted, backend_url=BACKEND_URL)
    pipeline, reporter = _pipeline(PAGE_WITH_COMPOSE, scripted, db_path, gateway=gateway)

    gateway._in_flight.acquire()
    try:
        result = pipeline.run()
    finally:
        gateway._in_flight.release()

    assert isinstance(result.error, AlreadyInFlight)
    assert reporter.last == "Already generating a reply, please wait..."
    assert scripted.calls_to(BACKEND_URL) == []


def test_malformed_thread_is_reported_not_raised(fake_session, make_response, db_path):
    fake_session.add("GET", MESSAGE_URL, make_response(200, {"threadId": "thread-1"}))
    fake_session.add(
        "GET", THREAD_URL, make_response(200, {"messages": [{"id": "a", "payload": {"parts": [None]}}]})
    )
    pipeline, reporter = _pipeline(PAGE_WITH_COMPOSE, fake_session, db_path)

    result = pipeline.run()

    assert isinstance(result.error, MalformedPayload)
    assert result.failed_stage is PipelineState.RESOLVING
    assert reporter.last.startswith("Error: ")
    assert fake_session.calls_to(BACKEND_URL) == []


def test_nested_run_does_not_clobber_failed_stage(scripted, db_path):
    calls = []

    def composer(thread, first_name, user_instructions):
        calls.append(user_instructions)
        if user_instructions == "outer":
            inner_results.append(pipeline.run("inner"))
            raise EmptyThread()
        return "inner prompt"

    inner_results = []
    pipeline, _ = _pipeline(PAGE_WITH_COMPOSE, scripted, db_path, composer=composer)

    outer = pipeline.run("outer")

    assert calls == ["outer", "inner"]
    assert inner_results[0].ok
    assert outer.failed_stage is PipelineState.COMPOSING
    assert outer.state is PipelineState.IDLE
