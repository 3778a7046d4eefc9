"""
Domain models (Pydantic v2) for the reply pipeline.

All models are frozen: a stage hands its output to the next stage and never
mutates it afterwards. Sensitive fields (addresses, subjects, bodies, prompts)
are hashed in repr so models can be logged safely.
"""

from __future__ import annotations

from hashlib import sha256
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _hash_value(value: str) -> str:
    digest = sha256(value.encode("utf-8")).hexdigest()
    return f"hash:{digest[:12]}"


class RedactedModel(BaseModel):
    """Base model that redacts sensitive fields in repr/dumps."""

    model_config = ConfigDict(frozen=True)
    _redact_fields = {"body", "from_address", "subject", "prompt", "text", "first_name"}

    def _redacted_dump(self) -> dict[str, Any]:
        data = self.model_dump(exclude_none=True)
        for field in self._redact_fields:
            if field in data and isinstance(data[field], str) and data[field]:
                data[field] = _hash_value(data[field])
        return data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._redacted_dump()})"

    def redacted(self) -> dict[str, Any]:
        """Public helper for telemetry-safe dumps."""
        return self._redacted_dump()


class Message(RedactedModel):
    """One message of a conversation with its fully decoded plain-text body."""

    id: str
    from_address: str = ""
    subject: str = ""
    date: str = ""
    body: str = ""


class Thread(RedactedModel):
    """Messages of a conversation in server order (assumed chronological)."""

    thread_id: str
    messages: tuple[Message, ...] = Field(min_length=1)

    @property
    def last_message(self) -> Message:
        return self.messages[-1]

    def __len__(self) -> int:
        return len(self.messages)

    def __repr__(self) -> str:
        return f"Thread(thread_id={self.thread_id!r}, messages={len(self.messages)})"


class IdentityRecord(RedactedModel):
    first_name: str


class GenerationRequest(RedactedModel):
    prompt: str


class GenerationResponse(RedactedModel):
    text: str
