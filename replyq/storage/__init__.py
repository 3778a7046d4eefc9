"""Storage - domain models and the persisted identity cache."""

from __future__ import annotations

from replyq.storage.models import (
    GenerationRequest,
    GenerationResponse,
    IdentityRecord,
    Message,
    Thread,
)

__all__ = [
    "GenerationRequest",
    "GenerationResponse",
    "IdentityRecord",
    "Message",
    "Thread",
]
