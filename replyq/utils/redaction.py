"""
Shared logging utilities for redacting sensitive information before telemetry.

Provides:
- redact(): Hash sensitive strings for correlation without exposure
- redact_prompt(): Hash and length of a prompt, no content
"""

from __future__ import annotations

from hashlib import sha256


def redact(value: str | None) -> str:
    """
    Return a stable hash representation of a sensitive string.
    """
    if not value:
        return "hash:missing"
    digest = sha256(value.encode("utf-8")).hexdigest()[:12]
    return f"hash:{digest}"


def redact_prompt(prompt: str) -> str:
    """Describe a prompt for logs without any of its text."""
    return f"({redact(prompt)}, len={len(prompt)})"
