"""Host UI boundary: where the active item is read and replies are written."""

from __future__ import annotations

from replyq.host.document import DocumentHostSurface, DocumentReplySurface
from replyq.host.surface import HostSurface, ReplySurface, select_reply_target

__all__ = [
    "DocumentHostSurface",
    "DocumentReplySurface",
    "HostSurface",
    "ReplySurface",
    "select_reply_target",
]
