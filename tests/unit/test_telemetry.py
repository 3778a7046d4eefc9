"""Tests for in-memory telemetry and log redaction helpers."""

from __future__ import annotations

from replyq.observability.telemetry import counter, get_counter, get_latency_stats, time_block
from replyq.utils.redaction import redact, redact_prompt


def test_counter_accumulates():
    counter("pipeline.success")
    counter("pipeline.success", increment=2)

    assert get_counter("pipeline.success") == 3
    assert get_counter("never.touched") == 0


def test_time_block_records_latency_even_on_error():
    with time_block("generation.latency"):
        pass
    try:
        with time_block("generation.latency"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    stats = get_latency_stats("generation.latency")
    assert stats["count"] == 2
    assert get_latency_stats("generation.latency_ms") == stats


def test_latency_stats_for_unknown_metric():
    assert get_latency_stats("missing")["count"] == 0


def test_redact_is_stable_and_hides_value():
    assert redact("alice@x.com") == redact("alice@x.com")
    assert "alice" not in redact("alice@x.com")
    assert redact(None) == "hash:missing"


def test_redact_prompt_carries_no_prompt_text():
    prompt = "You are writing an email reply as Sam." + "x" * 500

    redacted = redact_prompt(prompt)

    assert "Sam" not in redacted
    assert "You are" not in redacted
    assert redact(prompt) in redacted
    assert f"len={len(prompt)}" in redacted
