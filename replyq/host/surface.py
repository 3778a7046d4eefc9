"""
Capability interfaces the pipeline needs from the host UI.

The pipeline only talks to these protocols; concrete hosts (a live browser
page, an HTML snapshot) implement them.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class ReplySurface(Protocol):
    """An editable compose body."""

    def has_focus(self) -> bool: ...

    def contains_focus(self) -> bool: ...

    def write_text(self, text: str) -> None: ...

    def focus(self) -> None: ...


class HostSurface(Protocol):
    def find_active_item_ref(self) -> str | None:
        """Id of the message currently displayed, or None."""
        ...

    def find_reply_target(self) -> ReplySurface | None:
        """Compose body the reply should go into, or None."""
        ...


def select_reply_target(surfaces: Sequence[ReplySurface]) -> ReplySurface | None:
    """
    Pick the compose body a reply belongs in.

    Best effort: the surface holding (or containing) focus wins; otherwise the
    last one in document order, assumed to be the most recently opened.
    """
    for surface in surfaces:
        if surface.has_focus() or surface.contains_focus():
            return surface
    if surfaces:
        return surfaces[-1]
    return None
